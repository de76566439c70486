"""SQS proxy: queues and messages."""

from __future__ import annotations

from typing import Any

from stackview.base.exceptions import InvalidRequestError
from stackview.base.reshape import reshape_all
from stackview.base.service import ProxyService
from stackview.base.validation import as_int, compact, require

MESSAGE_FIELDS = {
    "messageId": "MessageId",
    "receiptHandle": "ReceiptHandle",
    "body": "Body",
    "attributes": "Attributes",
    "messageAttributes": "MessageAttributes",
}


def queue_name_from_url(queue_url: str) -> str:
    return queue_url.rstrip("/").split("/")[-1] if queue_url else ""


class SQSService(ProxyService):
    """Queue and message operations against the emulated SQS."""

    service_id = "sqs"
    client_attr = "sqs"

    # --- Queue lifecycle ---

    def list_queues(self) -> dict[str, Any]:
        """List queues with their attributes.

        A queue whose attributes cannot be read is still listed, with an
        empty ``attributes`` object.
        """
        resp = self._call("list_queues")
        queues = []
        for queue_url in resp.get("QueueUrls") or []:
            attrs = self._call_or(
                {}, "get_queue_attributes", QueueUrl=queue_url, AttributeNames=["All"]
            )
            queues.append({
                "queueUrl": queue_url,
                "queueName": queue_name_from_url(queue_url),
                "attributes": attrs.get("Attributes") or {},
            })
        return {"queues": queues}

    def create_queue(
        self, queue_name: str | None, attributes: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        require("Queue name is required", queue_name)
        params: dict[str, Any] = {"QueueName": queue_name}
        if attributes is not None and not isinstance(attributes, dict):
            raise InvalidRequestError("Queue attributes must be an object")
        if attributes:
            params["Attributes"] = {k: str(v) for k, v in attributes.items()}
        resp = self._call("create_queue", **params)
        return {"queueUrl": resp.get("QueueUrl"), "message": "Queue created successfully"}

    def delete_queue(self, queue_url: str | None) -> dict[str, Any]:
        require("Queue URL is required", queue_url)
        self._call("delete_queue", QueueUrl=queue_url)
        return {"message": "Queue deleted successfully"}

    def get_queue_attributes(self, queue_url: str | None) -> dict[str, Any]:
        require("Queue URL is required", queue_url)
        resp = self._call("get_queue_attributes", QueueUrl=queue_url, AttributeNames=["All"])
        return {"attributes": resp.get("Attributes") or {}}

    def purge_queue(self, queue_url: str | None) -> dict[str, Any]:
        require("Queue URL is required", queue_url)
        self._call("purge_queue", QueueUrl=queue_url)
        return {"message": "Queue purged successfully"}

    # --- Messaging ---

    def receive_messages(self, queue_url: str | None) -> dict[str, Any]:
        """Peek at up to ten messages without long polling."""
        require("Queue URL is required", queue_url)
        resp = self._call(
            "receive_message",
            QueueUrl=queue_url,
            MaxNumberOfMessages=10,
            VisibilityTimeout=30,
            WaitTimeSeconds=0,
            MessageAttributeNames=["All"],
            AttributeNames=["All"],
        )
        return {"messages": reshape_all(resp.get("Messages"), MESSAGE_FIELDS)}

    def send_message(
        self,
        queue_url: str | None,
        message_body: str | None,
        message_attributes: dict[str, Any] | None = None,
        delay_seconds: Any = None,
    ) -> dict[str, Any]:
        require("Queue URL and message body are required", queue_url, message_body)
        resp = self._call(
            "send_message",
            **compact(
                QueueUrl=queue_url,
                MessageBody=message_body,
                MessageAttributes=message_attributes or None,
                DelaySeconds=as_int(delay_seconds),
            ),
        )
        return {"messageId": resp.get("MessageId"), "message": "Message sent successfully"}

    def delete_message(self, queue_url: str | None, receipt_handle: str | None) -> dict[str, Any]:
        require("Queue URL and receipt handle are required", queue_url, receipt_handle)
        self._call("delete_message", QueueUrl=queue_url, ReceiptHandle=receipt_handle)
        return {"message": "Message deleted successfully"}

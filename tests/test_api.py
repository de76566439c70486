from unittest.mock import AsyncMock, MagicMock, patch
import dataclasses
import logging
import boto3
import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from moto import mock_aws

from stackview.app import create_app
from stackview.base.clients import ClientSet
from stackview.base.config import ConsoleConfig

QUEUE_URL = "http://localhost:4566/000000000000/orders"
TRUST = '{"Version": "2012-10-17", "Statement": []}'


def _client_error(code: str, message: str = "err") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


@pytest.fixture
def config():
    return ConsoleConfig(
        endpoint_url="http://localhost:4566",
        region_name="ap-south-1",
        refresh_interval_ms=5000,
        disabled_services=["apigateway"],
    )


@pytest.fixture
def api(config, mock_clients):
    app = create_app(config=config, clients=mock_clients)
    with TestClient(app) as client:
        yield client, mock_clients


# --- Health, settings and registry ---


class TestHealthRoutes:
    def test_health(self, api):
        client, _ = api
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["endpoint"] == "http://localhost:4566"
        statuses = {s["id"]: s["status"] for s in body["services"]}
        assert statuses["apigateway"] == "stopped"
        assert statuses["s3"] == "running"

    def test_health_all_errors_is_unhealthy(self, api):
        client, clients = api
        down = RuntimeError("down")
        clients.s3.list_buckets.side_effect = down
        clients.dynamodb.list_tables.side_effect = down
        clients.sqs.list_queues.side_effect = down
        clients.secretsmanager.list_secrets.side_effect = down
        clients.lambda_.list_functions.side_effect = down
        clients.iam.list_users.side_effect = down
        clients.logs.describe_log_groups.side_effect = down
        clients.events.list_event_buses.side_effect = down
        clients.scheduler.list_schedule_groups.side_effect = down
        clients.cloudformation.list_stacks.side_effect = down
        body = client.get("/api/health").json()
        assert body["status"] == "unhealthy"
        assert {s["status"] for s in body["services"]} == {"error", "stopped"}

    def test_health_fan_out_failure(self, api):
        client, _ = api
        with patch("stackview.api.health.check_health", AsyncMock(side_effect=RuntimeError("boom"))):
            resp = client.get("/api/health")
        assert resp.status_code == 500
        body = resp.json()
        assert body["status"] == "unhealthy"
        assert all(s["status"] == "error" for s in body["services"])

    def test_settings(self, api):
        client, _ = api
        assert client.get("/api/settings").json() == {
            "endpoint": "http://localhost:4566",
            "region": "ap-south-1",
            "refreshInterval": 5000,
        }

    def test_services(self, api):
        client, _ = api
        services = client.get("/api/services").json()
        assert services[0]["id"] == "s3"
        assert services[0]["displayName"] == "S3"
        assert {s["id"]: s["enabled"] for s in services}["apigateway"] is False

    def test_single_service(self, api):
        client, _ = api
        assert client.get("/api/services/sqs").json()["displayName"] == "SQS"
        resp = client.get("/api/services/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Service not found"}


# --- Error mapping ---


class TestErrors:
    def test_missing_field_is_400_without_sdk_call(self, api):
        client, clients = api
        resp = client.post("/api/s3/buckets", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bucket name is required"}
        clients.s3.create_bucket.assert_not_called()

    def test_malformed_json(self, api):
        client, clients = api
        resp = client.post(
            "/api/sqs/queues", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid request body"}
        clients.sqs.create_queue.assert_not_called()

    def test_upstream_message_relayed(self, api):
        client, clients = api
        clients.s3.list_buckets.side_effect = _client_error("AccessDenied", "Access Denied")
        resp = client.get("/api/s3/buckets")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Access Denied"}

    def test_not_found_is_404(self, api):
        client, clients = api
        clients.iam.get_user.side_effect = _client_error("NoSuchEntity", "The user with name bob cannot be found.")
        resp = client.get("/api/iam/users/bob")
        assert resp.status_code == 404
        assert resp.json() == {"error": "The user with name bob cannot be found."}

    def test_missing_resource_on_write_is_500(self, api):
        client, clients = api
        clients.s3.delete_bucket.side_effect = _client_error("NoSuchBucket", "The specified bucket does not exist")
        resp = client.delete("/api/s3/buckets", params={"bucketName": "gone"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "The specified bucket does not exist"}

    def test_missing_object_download_is_404(self, api):
        client, clients = api
        clients.s3.get_object.side_effect = _client_error("NoSuchKey", "The specified key does not exist.")
        resp = client.get("/api/s3/objects/download", params={"bucketName": "b", "key": "nope"})
        assert resp.status_code == 404

    def test_non_object_item_is_400(self, api):
        client, clients = api
        resp = client.post("/api/dynamodb/items", json={"tableName": "t", "item": "x"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Item must be a JSON object"}
        clients.dynamodb.put_item.assert_not_called()

    def test_non_object_queue_attributes_is_400(self, api):
        client, clients = api
        resp = client.post("/api/sqs/queues", json={"queueName": "q", "attributes": ["x"]})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Queue attributes must be an object"}
        clients.sqs.create_queue.assert_not_called()

    def test_unexpected_error_is_json_500(self, config, mock_clients):
        mock_clients.sqs.list_queues.side_effect = RuntimeError("boom")
        app = create_app(config=config, clients=mock_clients)
        with TestClient(app, raise_server_exceptions=False) as client:
            resp = client.get("/api/sqs/queues")
        assert resp.status_code == 500
        assert resp.json() == {"error": "boom"}


class TestRequestLogging:
    def test_access_line(self, api, caplog):
        client, _ = api
        caplog.set_level(logging.INFO, logger="stackview")
        client.get("/api/settings")
        access = [r for r in caplog.records if getattr(r, "status", None) is not None]
        assert access[-1].getMessage() == "GET /api/settings -> 200"
        assert access[-1].duration_ms >= 0

    def test_request_id_header(self, api):
        client, _ = api
        resp = client.get("/api/settings", headers={"X-Request-ID": "req-42"})
        assert resp.headers["x-request-id"] == "req-42"
        assert client.get("/api/settings").headers["x-request-id"]

    def test_sdk_failure_carries_request_fields(self, api, caplog):
        client, clients = api
        clients.s3.list_buckets.side_effect = _client_error("AccessDenied", "Access Denied")
        client.get("/api/s3/buckets", headers={"X-Request-ID": "req-7"})
        failure = next(r for r in caplog.records if getattr(r, "operation", None) == "list_buckets")
        assert failure.request_id == "req-7"
        assert failure.path == "/api/s3/buckets"


# --- Service routes ---


class TestS3Routes:
    def test_delete_bucket(self, api):
        client, clients = api
        resp = client.delete("/api/s3/buckets", params={"bucketName": "b"})
        assert resp.json() == {"success": True}
        clients.s3.delete_bucket.assert_called_once_with(Bucket="b")

    def test_delete_repeated_keys(self, api):
        client, clients = api
        client.delete("/api/s3/objects", params=[("bucketName", "b"), ("key", "k1"), ("key", "k2")])
        clients.s3.delete_objects.assert_called_once_with(
            Bucket="b", Delete={"Objects": [{"Key": "k1"}, {"Key": "k2"}]}
        )

    def test_download(self, api):
        client, clients = api
        body = MagicMock()
        body.read.return_value = b"hello"
        clients.s3.get_object.return_value = {"Body": body, "ContentType": "text/plain"}
        resp = client.get("/api/s3/objects/download", params={"bucketName": "b", "key": "dir/a.txt"})
        assert resp.status_code == 200
        assert resp.content == b"hello"
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["content-disposition"] == 'attachment; filename="a.txt"'

    def test_upload(self, api):
        client, clients = api
        resp = client.post(
            "/api/s3/objects/upload",
            data={"bucketName": "b", "key": "a.txt"},
            files={"file": ("a.txt", b"data", "text/plain")},
        )
        assert resp.json() == {"success": True, "key": "a.txt"}
        clients.s3.put_object.assert_called_once_with(
            Bucket="b", Key="a.txt", Body=b"data", ContentType="text/plain"
        )

    def test_upload_without_file(self, api):
        client, clients = api
        resp = client.post("/api/s3/objects/upload", data={"bucketName": "b", "key": "a.txt"})
        assert resp.status_code == 400
        clients.s3.put_object.assert_not_called()


class TestOtherRoutes:
    def test_sqs_delete_message(self, api):
        client, clients = api
        resp = client.delete("/api/sqs/messages", params={"queueUrl": QUEUE_URL, "receiptHandle": "rh"})
        assert resp.status_code == 200
        clients.sqs.delete_message.assert_called_once_with(QueueUrl=QUEUE_URL, ReceiptHandle="rh")

    def test_dynamodb_get_item(self, api):
        client, clients = api
        clients.dynamodb.get_item.return_value = {"Item": {"pk": {"S": "a"}}}
        resp = client.get("/api/dynamodb/items/a", params={"tableName": "t", "key": '{"pk": "a"}'})
        assert resp.json() == {"item": {"pk": "a"}}

    def test_iam_create_role_is_201(self, api):
        client, clients = api
        clients.iam.create_role.return_value = {"Role": {"RoleName": "r1"}}
        resp = client.post("/api/iam/roles", json={"roleName": "r1", "assumeRolePolicyDocument": TRUST})
        assert resp.status_code == 201
        assert resp.json()["roleName"] == "r1"

    def test_iam_bad_trust_policy(self, api):
        client, clients = api
        resp = client.post("/api/iam/roles", json={"roleName": "r1", "assumeRolePolicyDocument": "{bad"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON in assume role policy document"}
        clients.iam.create_role.assert_not_called()

    def test_iam_policy_arn_path(self, api):
        client, clients = api
        client.delete("/api/iam/policies/arn:aws:iam::000000000000:policy/read-only")
        clients.iam.delete_policy.assert_called_once_with(
            PolicyArn="arn:aws:iam::000000000000:policy/read-only"
        )

    def test_lambda_detail(self, api):
        client, clients = api
        clients.lambda_.get_function_configuration.return_value = {"FunctionName": "resize"}
        clients.lambda_.get_function.return_value = {}
        resp = client.get("/api/lambda/functions", params={"functionName": "resize"})
        assert resp.json()["function"]["functionName"] == "resize"

    def test_log_streams_route(self, api):
        client, clients = api
        clients.logs.describe_log_streams.return_value = {"logStreams": []}
        resp = client.get("/api/cloudwatch/log-groups/app/streams")
        assert resp.json() == {"logStreams": [], "nextToken": None}
        assert clients.logs.describe_log_streams.call_args.kwargs["logGroupName"] == "app"

    def test_eventbridge_list_is_bare_array(self, api):
        client, clients = api
        clients.events.list_event_buses.return_value = {"EventBuses": [{"Name": "default"}]}
        assert client.get("/api/eventbridge/buses").json() == [{"name": "default"}]

    def test_apigateway_stages(self, api):
        client, clients = api
        clients.apigateway.get_stages.return_value = {"item": [{"stageName": "dev"}]}
        resp = client.get("/api/apigateway/deployments", params={"restApiId": "a1", "type": "stages"})
        assert resp.json() == [{"stageName": "dev"}]

    def test_dynamodb_binary_attribute_is_base64(self, api):
        client, clients = api
        clients.dynamodb.scan.return_value = {
            "Items": [{"pk": {"S": "a"}, "blob": {"B": b"\x00\xff"}}],
            "Count": 1,
            "ScannedCount": 1,
        }
        resp = client.get("/api/dynamodb/items", params={"tableName": "t"})
        assert resp.status_code == 200
        assert resp.json()["items"] == [{"pk": "a", "blob": "AP8="}]


# --- Round trips through an in-memory AWS ---

_EMULATED = ("s3", "sqs", "dynamodb")


@pytest.fixture
def emulated(config):
    with mock_aws():
        real = {
            name: boto3.client(
                name,
                region_name="us-east-1",
                aws_access_key_id="testing",
                aws_secret_access_key="testing",
            )
            for name in _EMULATED
        }
        others = {
            f.name: MagicMock()
            for f in dataclasses.fields(ClientSet)
            if f.name != "endpoint_url" and f.name not in real
        }
        clients = ClientSet(endpoint_url=config.endpoint_url, **real, **others)
        with TestClient(create_app(config=config, clients=clients)) as client:
            yield client, clients


class TestRoundTrips:
    def test_bucket_create_list_delete(self, emulated):
        client, _ = emulated
        assert client.post("/api/s3/buckets", json={"bucketName": "reports"}).status_code == 200
        names = [b["name"] for b in client.get("/api/s3/buckets").json()["buckets"]]
        assert "reports" in names

        assert client.delete("/api/s3/buckets", params={"bucketName": "reports"}).json() == {"success": True}
        assert client.get("/api/s3/buckets").json()["buckets"] == []

    def test_missing_bucket_and_key(self, emulated):
        client, clients = emulated
        resp = client.delete("/api/s3/buckets", params={"bucketName": "never-made"})
        assert resp.status_code == 500
        assert "error" in resp.json()

        clients.s3.create_bucket(Bucket="docs")
        resp = client.get("/api/s3/objects/download", params={"bucketName": "docs", "key": "nope.txt"})
        assert resp.status_code == 404

    def test_upload_then_download(self, emulated):
        client, clients = emulated
        clients.s3.create_bucket(Bucket="docs")
        client.post(
            "/api/s3/objects/upload",
            data={"bucketName": "docs", "key": "notes/a.txt"},
            files={"file": ("a.txt", b"hello", "text/plain")},
        )
        resp = client.get("/api/s3/objects/download", params={"bucketName": "docs", "key": "notes/a.txt"})
        assert resp.status_code == 200
        assert resp.content == b"hello"

    def test_queue_create_then_list(self, emulated):
        client, _ = emulated
        resp = client.post("/api/sqs/queues", json={"queueName": "orders"})
        assert resp.status_code == 200
        queue_url = resp.json()["queueUrl"]

        queues = client.get("/api/sqs/queues").json()["queues"]
        assert [q["queueName"] for q in queues] == ["orders"]
        assert queues[0]["attributes"]

        client.post("/api/sqs/messages", json={"queueUrl": queue_url, "messageBody": "hi"})
        received = client.get("/api/sqs/messages", params={"queueUrl": queue_url}).json()
        assert [m["body"] for m in received["messages"]] == ["hi"]

    def test_dynamodb_item_round_trip(self, emulated):
        client, clients = emulated
        clients.dynamodb.create_table(
            TableName="things",
            KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "pk", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        item = {"pk": "a", "price": 1.5, "count": 3, "tags": ["x", "y"]}
        assert client.post("/api/dynamodb/items", json={"tableName": "things", "item": item}).status_code == 200
        clients.dynamodb.put_item(TableName="things", Item={"pk": {"S": "b"}, "blob": {"B": b"abc"}})

        items = client.get("/api/dynamodb/items", params={"tableName": "things"}).json()["items"]
        by_key = {i["pk"]: i for i in items}
        assert by_key["a"] == item
        assert by_key["b"] == {"pk": "b", "blob": "YWJj"}

        resp = client.get("/api/dynamodb/items/c", params={"tableName": "things", "key": '{"pk": "c"}'})
        assert resp.status_code == 404

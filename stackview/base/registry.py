"""
Static catalog of the AWS services the console knows about.

The catalog is read-only; :func:`build_registry` returns fresh copies with
the ``enabled`` flag resolved against the configured list of disabled ids.
"""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ServiceDefinition(BaseModel):
    """One registry entry, serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    name: str
    display_name: str
    icon: str
    description: str
    enabled: bool = True
    href: Optional[str] = None


def _entry(id: str, display_name: str, icon: str, description: str) -> ServiceDefinition:
    return ServiceDefinition(
        id=id,
        name=id,
        display_name=display_name,
        icon=icon,
        description=description,
        href=f"/services/{id}",
    )


SERVICE_CATALOG: tuple[ServiceDefinition, ...] = (
    _entry("s3", "S3", "Database", "Simple Storage Service - Object storage"),
    _entry("sqs", "SQS", "MessageSquare", "Simple Queue Service - Message queuing"),
    _entry("dynamodb", "DynamoDB", "Table", "NoSQL key-value and document database"),
    _entry("secretsmanager", "Secrets Manager", "Key", "Secrets management service"),
    _entry("lambda", "Lambda", "Zap", "Serverless compute functions"),
    _entry("iam", "IAM", "Shield", "Identity and Access Management"),
    _entry("cloudwatch", "CloudWatch", "Activity", "Monitoring and observability"),
    _entry("logs", "CloudWatch Logs", "FileText", "Log groups, streams and events"),
    _entry("eventbridge", "EventBridge", "Radio", "Serverless event bus"),
    _entry("scheduler", "EventBridge Scheduler", "Clock", "Scheduled invocations"),
    _entry("cloudformation", "CloudFormation", "Layers", "Infrastructure as code stacks"),
    _entry("apigateway", "API Gateway", "Globe", "REST API management"),
)


def build_registry(disabled: Iterable[str] = ()) -> list[ServiceDefinition]:
    """Return the catalog in order, disabling any id listed in *disabled*."""
    disabled_ids = {d.strip().lower() for d in disabled}
    return [
        entry.model_copy(update={"enabled": entry.id not in disabled_ids})
        for entry in SERVICE_CATALOG
    ]


def get_service(registry: Iterable[ServiceDefinition], service_id: str) -> ServiceDefinition | None:
    for entry in registry:
        if entry.id == service_id:
            return entry
    return None

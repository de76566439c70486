"""
Client factory for the emulation endpoint.

Builds one boto3 client per AWS service, all pointed at the same endpoint
with the same region and static credentials. The resulting
:class:`ClientSet` is created once per application and passed explicitly
to services and the health aggregator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config

from stackview.base.config import ConsoleConfig
from stackview.base.logger import sv_logger


@dataclass(frozen=True)
class ClientSet:
    """Bundle of boto3 clients sharing one endpoint.

    ``lambda_`` carries a trailing underscore because ``lambda`` is a
    keyword.
    """

    s3: Any
    sqs: Any
    dynamodb: Any
    secretsmanager: Any
    lambda_: Any
    iam: Any
    cloudwatch: Any
    logs: Any
    events: Any
    scheduler: Any
    cloudformation: Any
    apigateway: Any
    endpoint_url: str = ""


# ClientSet field -> boto3 service name
_SERVICE_NAMES: dict[str, str] = {
    "s3": "s3",
    "sqs": "sqs",
    "dynamodb": "dynamodb",
    "secretsmanager": "secretsmanager",
    "lambda_": "lambda",
    "iam": "iam",
    "cloudwatch": "cloudwatch",
    "logs": "logs",
    "events": "events",
    "scheduler": "scheduler",
    "cloudformation": "cloudformation",
    "apigateway": "apigateway",
}


def build_clients(config: ConsoleConfig) -> ClientSet:
    """Create every SDK client from *config*.

    Args:
        config: Validated console configuration.

    Returns:
        A :class:`ClientSet` whose clients all target ``config.endpoint_url``.
    """
    session = boto3.session.Session(
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=config.region_name,
    )
    clients: dict[str, Any] = {}
    for field, service_name in _SERVICE_NAMES.items():
        client_config = None
        if service_name == "s3":
            # LocalStack serves buckets by path, not by virtual host.
            client_config = Config(s3={"addressing_style": "path"})
        clients[field] = session.client(
            service_name,
            endpoint_url=config.endpoint_url,
            config=client_config,
        )
    sv_logger.debug(
        f"Created {len(clients)} SDK clients",
        endpoint=config.endpoint_url,
    )
    return ClientSet(endpoint_url=config.endpoint_url, **clients)

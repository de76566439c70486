"""
Health aggregation across the registered services.

Each enabled service with a probe gets one cheap listing call; all probes
run concurrently and are caught individually, so one failing service never
masks the others. The aggregate is ``healthy`` when at least one service
answered.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from stackview.base.async_support import async_wrap
from stackview.base.clients import ClientSet
from stackview.base.logger import sv_logger
from stackview.base.registry import ServiceDefinition

ServiceStatus = Literal["running", "stopped", "error", "unknown"]


class ServiceHealthStatus(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    display_name: str
    icon: str
    description: str
    status: ServiceStatus
    enabled: bool
    href: Optional[str] = None

    @classmethod
    def from_definition(
        cls, service: ServiceDefinition, status: ServiceStatus
    ) -> "ServiceHealthStatus":
        return cls(**service.model_dump(), status=status)


class AggregateHealth(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["healthy", "unhealthy"]
    endpoint: str
    last_checked: str
    services: list[ServiceHealthStatus]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# service id -> blocking probe issued against the matching client
PROBES: dict[str, Callable[[ClientSet], Any]] = {
    "s3": lambda c: c.s3.list_buckets(),
    "dynamodb": lambda c: c.dynamodb.list_tables(),
    "sqs": lambda c: c.sqs.list_queues(),
    "secretsmanager": lambda c: c.secretsmanager.list_secrets(),
    "lambda": lambda c: c.lambda_.list_functions(),
    "iam": lambda c: c.iam.list_users(),
    "cloudwatch": lambda c: c.logs.describe_log_groups(limit=1),
    "logs": lambda c: c.logs.describe_log_groups(limit=1),
    "eventbridge": lambda c: c.events.list_event_buses(),
    "scheduler": lambda c: c.scheduler.list_schedule_groups(),
    "cloudformation": lambda c: c.cloudformation.list_stacks(),
    "apigateway": lambda c: c.apigateway.get_rest_apis(),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def check_service(
    service: ServiceDefinition,
    clients: ClientSet,
    probes: dict[str, Callable[[ClientSet], Any]] = PROBES,
) -> ServiceHealthStatus:
    """Probe one service and classify the outcome.

    Args:
        service: Registry entry to check.
        clients: SDK clients for the emulation endpoint.
        probes: Probe table; defaults to :data:`PROBES`.

    Returns:
        ``stopped`` for disabled services, ``unknown`` when no probe exists,
        otherwise ``running`` or ``error`` depending on the probe.
    """
    if not service.enabled:
        return ServiceHealthStatus.from_definition(service, "stopped")
    probe = probes.get(service.id)
    if probe is None:
        return ServiceHealthStatus.from_definition(service, "unknown")
    try:
        await async_wrap(probe)(clients)
    except Exception as e:
        sv_logger.warning(
            f"Error checking {service.name} health: {e}",
            service=service.id,
            operation="health_probe",
        )
        return ServiceHealthStatus.from_definition(service, "error")
    return ServiceHealthStatus.from_definition(service, "running")


async def check_health(
    clients: ClientSet,
    registry: Iterable[ServiceDefinition],
    endpoint: str,
    probes: dict[str, Callable[[ClientSet], Any]] = PROBES,
) -> AggregateHealth:
    """Fan out probes for every registered service and aggregate them.

    Individual probe failures are folded into per-service ``error``
    statuses. Anything escaping the fan-out itself propagates; use
    :func:`failed_health` to build the matching response.
    """
    services = list(registry)
    results = await asyncio.gather(
        *(check_service(service, clients, probes) for service in services)
    )
    healthy = any(result.status == "running" for result in results)
    return AggregateHealth(
        status="healthy" if healthy else "unhealthy",
        endpoint=endpoint,
        last_checked=_now(),
        services=list(results),
    )


def failed_health(registry: Iterable[ServiceDefinition], endpoint: str) -> AggregateHealth:
    """Aggregate reported when the fan-out itself failed: everything errored."""
    return AggregateHealth(
        status="unhealthy",
        endpoint=endpoint,
        last_checked=_now(),
        services=[
            ServiceHealthStatus.from_definition(service, "error") for service in registry
        ],
    )

"""Health, settings and service catalog routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stackview.api.deps import get_clients, get_config, get_registry
from stackview.base.clients import ClientSet
from stackview.base.config import ConsoleConfig
from stackview.base.exceptions import ResourceNotFoundError
from stackview.base.logger import sv_logger
from stackview.base.registry import ServiceDefinition, get_service
from stackview.health import check_health, failed_health

router = APIRouter()


@router.get("/health")
async def health(
    clients: ClientSet = Depends(get_clients),
    config: ConsoleConfig = Depends(get_config),
    registry: list[ServiceDefinition] = Depends(get_registry),
) -> JSONResponse:
    """Probe every registered service and report the aggregate.

    A failure of the fan-out itself yields 500 with every service marked
    ``error``.
    """
    try:
        result = await check_health(clients, registry, config.endpoint_url)
    except Exception as e:
        sv_logger.error(f"Health check failed: {e}", operation="check_health", exc_info=True)
        result = failed_health(registry, config.endpoint_url)
        return JSONResponse(result.to_dict(), status_code=500)
    return JSONResponse(result.to_dict())


@router.get("/settings")
async def settings(config: ConsoleConfig = Depends(get_config)) -> dict[str, Any]:
    return {
        "endpoint": config.endpoint_url,
        "region": config.region_name,
        "refreshInterval": config.refresh_interval_ms,
    }


@router.get("/services")
async def list_services(
    registry: list[ServiceDefinition] = Depends(get_registry),
) -> list[dict[str, Any]]:
    return [entry.model_dump(by_alias=True) for entry in registry]


@router.get("/services/{service_id}")
async def describe_service(
    service_id: str, registry: list[ServiceDefinition] = Depends(get_registry)
) -> dict[str, Any]:
    entry = get_service(registry, service_id)
    if entry is None:
        raise ResourceNotFoundError("Service not found")
    return entry.model_dump(by_alias=True)

"""FastAPI dependencies shared by every router.

The application factory stores the configuration, the SDK clients and the
service registry on ``app.state``; handlers receive them through these
functions instead of module-level singletons.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from fastapi import Depends, Request

from stackview.base.clients import ClientSet
from stackview.base.config import ConsoleConfig
from stackview.base.registry import ServiceDefinition
from stackview.base.service import ProxyService

S = TypeVar("S", bound=ProxyService)


def get_config(request: Request) -> ConsoleConfig:
    return request.app.state.config


def get_clients(request: Request) -> ClientSet:
    return request.app.state.clients


def get_registry(request: Request) -> list[ServiceDefinition]:
    return request.app.state.registry


def service(cls: type[S]) -> Callable[..., S]:
    """Build a dependency that instantiates *cls* over the shared clients.

    Example::

        @router.get("/buckets")
        async def list_buckets(svc: S3Service = Depends(service(S3Service))):
            return await svc.alist_buckets()
    """

    def _dependency(clients: ClientSet = Depends(get_clients)) -> S:
        return cls(clients)

    return _dependency


"""Core building blocks shared by every proxy service.

Configuration, SDK client construction, the service registry and the
error hierarchy live here.
"""

from .config import ConsoleConfig, load_config
from .clients import ClientSet, build_clients
from .exceptions import (
    ConsoleError,
    InvalidRequestError,
    ResourceNotFoundError,
    UpstreamError,
)
from .registry import SERVICE_CATALOG, ServiceDefinition, build_registry
from .service import ProxyService


__all__ = [
    "ConsoleConfig",
    "load_config",
    "ClientSet",
    "build_clients",
    "ConsoleError",
    "InvalidRequestError",
    "ResourceNotFoundError",
    "UpstreamError",
    "SERVICE_CATALOG",
    "ServiceDefinition",
    "build_registry",
    "ProxyService",
]

"""
Base class for the resource proxy services.

Each AWS service module subclasses :class:`ProxyService`, names the client
it uses and issues SDK calls through :meth:`ProxyService._call`, which turns
botocore failures into :class:`UpstreamError` (or a mapped subclass) after
logging them with the service and operation name.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from stackview.base.async_support import AsyncMixin
from stackview.base.clients import ClientSet
from stackview.base.exceptions import UpstreamError
from stackview.base.logger import sv_logger

T = TypeVar("T")


def upstream_message(e: Exception) -> str:
    """Extract the SDK's own error message."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        return error.get("Message") or error.get("Code") or str(e)
    return str(e)


def error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


class ProxyService(AsyncMixin):
    """Common plumbing for one AWS service.

    Attributes:
        service_id: Registry id used in log records.
        client_attr: Name of the :class:`ClientSet` field this service uses.
    """

    service_id: str = ""
    client_attr: str = ""
    _ERROR_MAP: dict[str, type[UpstreamError]] = {}

    def __init__(self, clients: ClientSet) -> None:
        self.clients = clients
        self.client = getattr(clients, self.client_attr)

    def _handle(self, e: Exception, operation: str, not_found: bool = False) -> NoReturn:
        message = upstream_message(e)
        sv_logger.log_operation(
            logging.ERROR,
            f"{operation} failed: {message}",
            service=self.service_id,
            operation=operation,
            endpoint=self.clients.endpoint_url or None,
        )
        exc: type[UpstreamError] = UpstreamError
        if not_found and isinstance(e, ClientError):
            exc = self._ERROR_MAP.get(error_code(e), UpstreamError)
        raise exc(message) from e

    def _call(self, operation: str, *, not_found: bool = False, **params: Any) -> Any:
        """Invoke ``client.<operation>(**params)`` and normalise failures.

        Error codes listed in ``_ERROR_MAP`` are only translated when
        *not_found* is set, i.e. for single-resource reads. Everywhere else a
        missing resource is an ordinary upstream failure (500).
        """
        try:
            return getattr(self.client, operation)(**params)
        except (ClientError, BotoCoreError) as e:
            self._handle(e, operation, not_found)

    def _call_or(self, default: T, operation: str, **params: Any) -> Any:
        """Like :meth:`_call` but fall back to *default* on an SDK failure.

        Used by compound reads where one failed sub-lookup must not fail the
        whole listing.
        """
        try:
            return getattr(self.client, operation)(**params)
        except (ClientError, BotoCoreError) as e:
            sv_logger.warning(
                f"{operation} failed, using fallback: {upstream_message(e)}",
                service=self.service_id,
                operation=operation,
            )
            return default

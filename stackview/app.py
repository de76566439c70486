"""
Application factory for the Stackview HTTP API.

``create_app`` resolves the configuration, builds one set of SDK clients
and the service registry, stores them on ``app.state`` and mounts every
router under ``/api``. Each request is logged with its method, path, status
and duration, and its response carries an ``X-Request-ID`` header. Run it
with uvicorn::

    uvicorn stackview.app:create_app --factory
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stackview import __version__
from stackview.api import router as api_router
from stackview.base.clients import ClientSet, build_clients
from stackview.base.config import ConsoleConfig, load_config
from stackview.base.exceptions import ConsoleError
from stackview.base.logger import bind_request, sv_logger
from stackview.base.registry import ServiceDefinition, build_registry


async def _console_error(request: Request, exc: ConsoleError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    sv_logger.debug(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    sv_logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


async def _log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind request fields for every record logged while serving, then log an access line."""
    with bind_request(
        request.method, request.url.path, request.headers.get("x-request-id")
    ) as ctx:
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
        finally:
            sv_logger.log_request(status, (time.perf_counter() - started) * 1000)
        response.headers["X-Request-ID"] = ctx.request_id
        return response


def create_app(
    config: ConsoleConfig | None = None,
    clients: ClientSet | None = None,
    registry: list[ServiceDefinition] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Console configuration; resolved from the environment when
            omitted.
        clients: Pre-built SDK clients (tests pass mocks here).
        registry: Service registry; built from ``config`` when omitted.

    Returns:
        A configured :class:`FastAPI` instance.
    """
    config = config or load_config()
    sv_logger.set_level(config.log_level)

    app = FastAPI(title="Stackview", version=__version__)
    app.state.config = config
    app.state.clients = clients or build_clients(config)
    app.state.registry = registry if registry is not None else build_registry(config.disabled_services)

    app.add_exception_handler(ConsoleError, _console_error)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(Exception, _unhandled)
    app.middleware("http")(_log_requests)
    app.include_router(api_router, prefix="/api")

    sv_logger.info(
        f"Console ready for {config.endpoint_url} ({config.region_name})",
        endpoint=config.endpoint_url,
    )
    return app

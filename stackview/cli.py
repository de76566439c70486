"""Stackview CLI: serve the console API or check emulator health.

Usage examples::

    stackview serve --host 0.0.0.0 --port 8080
    stackview --endpoint http://localhost:4566 health
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from pydantic import ValidationError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``stackview`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="stackview",
        description="Admin console API for a local AWS emulator",
    )
    parser.add_argument(
        "--endpoint", "-e",
        default=None,
        help="Emulation endpoint (defaults to $LOCALSTACK_ENDPOINT)",
    )
    parser.add_argument(
        "--region", "-r",
        default=None,
        help="AWS region (defaults to $AWS_REGION)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API under uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    sub.add_parser("health", help="Probe every service and print the result")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    ``health`` prints the aggregate as JSON and exits with status 1 when
    no service is running.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    from stackview.base.config import load_config

    overrides = {}
    if ns.endpoint:
        overrides["endpoint_url"] = ns.endpoint
    if ns.region:
        overrides["region_name"] = ns.region
    try:
        config = load_config(**overrides)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if ns.command == "serve":
        # Lazy-import so `health` does not pull in the web stack
        import uvicorn

        from stackview.app import create_app

        server = uvicorn.Server(
            uvicorn.Config(
                create_app(config),
                host=ns.host,
                port=ns.port,
                log_level=config.log_level.lower(),
            )
        )
        server.run()
        return

    from stackview.base.clients import build_clients
    from stackview.base.registry import build_registry
    from stackview.health import check_health

    result = asyncio.run(
        check_health(
            build_clients(config),
            build_registry(config.disabled_services),
            config.endpoint_url,
        )
    )
    print(json.dumps(result.to_dict(), indent=2))
    if result.status != "healthy":
        sys.exit(1)


if __name__ == "__main__":
    main()

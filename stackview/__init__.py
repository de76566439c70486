"""Stackview: an administrative HTTP API for a local AWS emulator.

Proxies console requests to boto3 calls against a single LocalStack
endpoint and aggregates per-service health::

    from stackview.app import create_app

    app = create_app()
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

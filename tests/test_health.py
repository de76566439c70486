import asyncio
import pytest
from botocore.exceptions import EndpointConnectionError

from stackview.base.registry import build_registry, get_service
from stackview.health import check_health, check_service, failed_health

ENDPOINT = "http://localhost:4566"


@pytest.fixture
def registry():
    return build_registry()


def _run(coro):
    return asyncio.run(coro)


class TestCheckService:
    def test_running(self, mock_clients, registry):
        result = _run(check_service(get_service(registry, "s3"), mock_clients))
        assert result.status == "running"
        mock_clients.s3.list_buckets.assert_called_once_with()

    def test_error(self, mock_clients, registry):
        mock_clients.sqs.list_queues.side_effect = EndpointConnectionError(endpoint_url=ENDPOINT)
        result = _run(check_service(get_service(registry, "sqs"), mock_clients))
        assert result.status == "error"

    def test_disabled_is_stopped_without_probe(self, mock_clients):
        service = get_service(build_registry(["s3"]), "s3")
        result = _run(check_service(service, mock_clients))
        assert result.status == "stopped"
        assert result.enabled is False
        mock_clients.s3.list_buckets.assert_not_called()

    def test_unknown_without_probe(self, mock_clients, registry):
        result = _run(check_service(get_service(registry, "s3"), mock_clients, probes={}))
        assert result.status == "unknown"

    def test_serialises_camel_case(self, mock_clients, registry):
        result = _run(check_service(get_service(registry, "secretsmanager"), mock_clients))
        data = result.model_dump(by_alias=True)
        assert data["displayName"] == "Secrets Manager"
        assert data["status"] == "running"


class TestCheckHealth:
    def test_healthy_when_any_service_runs(self, mock_clients, registry):
        mock_clients.s3.list_buckets.side_effect = RuntimeError("down")
        health = _run(check_health(mock_clients, registry, ENDPOINT))
        assert health.status == "healthy"
        statuses = {s.id: s.status for s in health.services}
        assert statuses["s3"] == "error"
        assert statuses["dynamodb"] == "running"
        assert len(health.services) == len(registry)

    def test_unhealthy_when_every_probe_fails(self, mock_clients, registry):
        probes = {s.id: _failing for s in registry}
        health = _run(check_health(mock_clients, registry, ENDPOINT, probes))
        assert health.status == "unhealthy"
        assert {s.status for s in health.services} == {"error"}

    def test_unhealthy_when_all_disabled(self, mock_clients):
        registry = build_registry([s.id for s in build_registry()])
        health = _run(check_health(mock_clients, registry, ENDPOINT))
        assert health.status == "unhealthy"
        assert {s.status for s in health.services} == {"stopped"}

    def test_to_dict(self, mock_clients, registry):
        data = _run(check_health(mock_clients, registry, ENDPOINT)).to_dict()
        assert data["endpoint"] == ENDPOINT
        assert data["lastChecked"].endswith("Z")
        assert data["services"][0]["id"] == "s3"


def _failing(clients):
    raise RuntimeError("unreachable")


def test_failed_health(registry):
    data = failed_health(registry, ENDPOINT).to_dict()
    assert data["status"] == "unhealthy"
    assert all(s["status"] == "error" for s in data["services"])

from unittest.mock import AsyncMock, patch
import json
import pytest

from stackview.cli import main
from stackview.health import AggregateHealth


def _health(status: str) -> AggregateHealth:
    return AggregateHealth(
        status=status, endpoint="http://emu:4566", last_checked="2024-01-01T00:00:00Z", services=[]
    )


class TestHealthCommand:
    @patch("stackview.health.check_health", new_callable=AsyncMock)
    @patch("stackview.base.clients.build_clients")
    def test_healthy(self, mock_build, mock_check, capsys):
        mock_check.return_value = _health("healthy")
        main(["--endpoint", "http://emu:4566", "health"])
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "healthy"
        config = mock_build.call_args.args[0]
        assert config.endpoint_url == "http://emu:4566"
        assert mock_check.call_args.args[2] == "http://emu:4566"

    @patch("stackview.health.check_health", new_callable=AsyncMock)
    @patch("stackview.base.clients.build_clients")
    def test_unhealthy_exits_nonzero(self, mock_build, mock_check, capsys):
        mock_check.return_value = _health("unhealthy")
        with pytest.raises(SystemExit) as exc:
            main(["health"])
        assert exc.value.code == 1


class TestServeCommand:
    @patch("uvicorn.Server")
    @patch("stackview.app.create_app")
    def test_runs_uvicorn(self, mock_create, mock_server):
        main(["-r", "eu-west-1", "serve", "--port", "9000"])
        config = mock_create.call_args.args[0]
        assert config.region_name == "eu-west-1"
        uvicorn_config = mock_server.call_args.args[0]
        assert uvicorn_config.port == 9000
        mock_server.return_value.run.assert_called_once_with()


def test_invalid_config(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--endpoint", "not a url", "health"])
    assert exc.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err

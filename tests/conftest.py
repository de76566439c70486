from unittest.mock import MagicMock
import dataclasses
import pytest

from stackview.base.clients import ClientSet


@pytest.fixture
def mock_clients():
    """A ClientSet whose every client is a separate MagicMock."""
    names = [f.name for f in dataclasses.fields(ClientSet) if f.name != "endpoint_url"]
    return ClientSet(endpoint_url="http://localhost:4566", **{name: MagicMock() for name in names})

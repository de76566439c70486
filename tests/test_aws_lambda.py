import asyncio
import pytest
from botocore.exceptions import ClientError

from stackview.aws.lambda_service import LambdaService, compose_function
from stackview.base.exceptions import ResourceNotFoundError, UpstreamError

CONFIGURATION = {
    "FunctionName": "resize",
    "FunctionArn": "arn:aws:lambda:ap-south-1:000000000000:function:resize",
    "Runtime": "python3.12",
    "MemorySize": 128,
}


def _client_error(code: str, message: str = "err") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


@pytest.fixture
def lambda_(mock_clients):
    yield LambdaService(mock_clients), mock_clients.lambda_


def test_compose_function():
    detail = compose_function(
        CONFIGURATION,
        {"Code": {"RepositoryType": "S3", "Location": "http://x"}, "Tags": {"env": "dev"}},
    )
    assert detail["functionName"] == "resize"
    assert detail["memorySize"] == 128
    assert detail["code"] == {"repositoryType": "S3", "location": "http://x"}
    assert detail["tags"] == {"env": "dev"}
    assert "configuration" not in detail


class TestListFunctions:
    def test_success(self, lambda_):
        instance, client = lambda_
        client.list_functions.return_value = {"Functions": [CONFIGURATION]}
        functions = instance.list_functions()["functions"]
        assert functions == [{
            "functionName": "resize",
            "functionArn": CONFIGURATION["FunctionArn"],
            "runtime": "python3.12",
            "memorySize": 128,
        }]

    def test_empty(self, lambda_):
        instance, client = lambda_
        client.list_functions.return_value = {}
        assert instance.list_functions() == {"functions": []}

    def test_async_variant(self, lambda_):
        instance, client = lambda_
        client.list_functions.return_value = {"Functions": []}
        assert asyncio.run(instance.alist_functions()) == {"functions": []}


class TestGetFunction:
    def test_combines_both_calls(self, lambda_):
        instance, client = lambda_
        client.get_function_configuration.return_value = CONFIGURATION
        client.get_function.return_value = {
            "Configuration": CONFIGURATION,
            "Code": {"RepositoryType": "S3", "Location": "http://x"},
        }
        result = asyncio.run(instance.get_function("resize"))
        function = result["function"]
        assert function["functionName"] == "resize"
        assert function["code"]["location"] == "http://x"
        assert function["configuration"] == CONFIGURATION
        client.get_function_configuration.assert_called_once_with(FunctionName="resize")
        client.get_function.assert_called_once_with(FunctionName="resize")

    def test_not_found(self, lambda_):
        instance, client = lambda_
        client.get_function_configuration.side_effect = _client_error(
            "ResourceNotFoundException", "Function not found: arn:..."
        )
        client.get_function.return_value = {}
        with pytest.raises(ResourceNotFoundError, match="Function ghost not found"):
            asyncio.run(instance.get_function("ghost"))

    def test_other_failure_is_relayed(self, lambda_):
        instance, client = lambda_
        client.get_function_configuration.return_value = CONFIGURATION
        client.get_function.side_effect = _client_error("ServiceException", "boom")
        with pytest.raises(UpstreamError, match="boom"):
            asyncio.run(instance.get_function("resize"))

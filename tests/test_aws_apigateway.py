import pytest
from botocore.exceptions import ClientError

from stackview.aws.apigateway import APIGatewayService
from stackview.base.exceptions import InvalidRequestError, UpstreamError


def _client_error(code: str, message: str = "err") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


@pytest.fixture
def apigateway(mock_clients):
    yield APIGatewayService(mock_clients), mock_clients.apigateway


# --- REST APIs ---


class TestApis:
    def test_list(self, apigateway):
        instance, client = apigateway
        client.get_rest_apis.return_value = {
            "items": [{"id": "a1", "name": "orders", "ResponseMetadata": {}}],
        }
        assert instance.list_apis() == [{"id": "a1", "name": "orders"}]
        client.get_rest_apis.assert_called_once_with(limit=500)

    def test_create(self, apigateway):
        instance, client = apigateway
        client.create_rest_api.return_value = {"id": "a1", "name": "orders", "rootResourceId": "r0"}
        result = instance.create_api({"name": "orders", "description": "d"})
        client.create_rest_api.assert_called_once_with(name="orders", description="d")
        assert result == {"id": "a1", "name": "orders", "rootResourceId": "r0"}

    def test_create_requires_name(self, apigateway):
        instance, client = apigateway
        with pytest.raises(InvalidRequestError, match="API name is required"):
            instance.create_api({})
        client.create_rest_api.assert_not_called()

    def test_get_missing(self, apigateway):
        instance, client = apigateway
        client.get_rest_api.side_effect = _client_error("NotFoundException", "Invalid API identifier specified")
        with pytest.raises(UpstreamError, match="Invalid API identifier") as exc:
            instance.get_api("nope")
        assert exc.value.status_code == 500

    def test_update(self, apigateway):
        instance, client = apigateway
        ops = [{"op": "replace", "path": "/name", "value": "renamed"}]
        client.update_rest_api.return_value = {"id": "a1", "name": "renamed"}
        assert instance.update_api("a1", ops) == {"id": "a1", "name": "renamed"}
        client.update_rest_api.assert_called_once_with(restApiId="a1", patchOperations=ops)

    def test_update_requires_list(self, apigateway):
        instance, client = apigateway
        with pytest.raises(InvalidRequestError, match="Patch operations are required"):
            instance.update_api("a1", None)
        client.update_rest_api.assert_not_called()

    def test_delete(self, apigateway):
        instance, client = apigateway
        assert instance.delete_api("a1") == {"success": True}
        client.delete_rest_api.assert_called_once_with(restApiId="a1")


# --- Resources ---


class TestResources:
    def test_list(self, apigateway):
        instance, client = apigateway
        client.get_resources.return_value = {"items": [{"id": "r0", "path": "/"}]}
        assert instance.list_resources("a1") == [{"id": "r0", "path": "/"}]

    def test_create(self, apigateway):
        instance, client = apigateway
        client.create_resource.return_value = {"id": "r1", "parentId": "r0", "pathPart": "orders", "path": "/orders"}
        result = instance.create_resource("a1", "r0", "orders")
        client.create_resource.assert_called_once_with(restApiId="a1", parentId="r0", pathPart="orders")
        assert result["path"] == "/orders"

    def test_create_requires_path_part(self, apigateway):
        instance, client = apigateway
        with pytest.raises(InvalidRequestError, match="parent ID, and path part are required"):
            instance.create_resource("a1", "r0", "")
        client.create_resource.assert_not_called()

    def test_delete(self, apigateway):
        instance, client = apigateway
        instance.delete_resource("a1", "r1")
        client.delete_resource.assert_called_once_with(restApiId="a1", resourceId="r1")


# --- Deployments & stages ---


class TestDeployments:
    def test_list_deployments(self, apigateway):
        instance, client = apigateway
        client.get_deployments.return_value = {"items": [{"id": "d1"}]}
        assert instance.list_deployments("a1") == [{"id": "d1"}]
        client.get_stages.assert_not_called()

    def test_list_stages(self, apigateway):
        instance, client = apigateway
        client.get_stages.return_value = {"item": [{"stageName": "dev", "deploymentId": "d1"}]}
        assert instance.list_deployments("a1", "stages") == [{"deploymentId": "d1", "stageName": "dev"}]
        client.get_deployments.assert_not_called()

    def test_create_deployment(self, apigateway):
        instance, client = apigateway
        client.create_deployment.return_value = {"id": "d2"}
        assert instance.create_deployment({"restApiId": "a1", "stageName": "dev"}) == {"id": "d2"}
        client.create_deployment.assert_called_once_with(restApiId="a1", stageName="dev")
        client.create_stage.assert_not_called()

    def test_create_stage(self, apigateway):
        instance, client = apigateway
        client.create_stage.return_value = {"stageName": "prod", "deploymentId": "d1"}
        instance.create_deployment({"restApiId": "a1", "type": "stage", "deploymentId": "d1", "stageName": "prod"})
        client.create_stage.assert_called_once_with(restApiId="a1", deploymentId="d1", stageName="prod")
        client.create_deployment.assert_not_called()

    def test_create_stage_requires_deployment(self, apigateway):
        instance, client = apigateway
        with pytest.raises(InvalidRequestError, match="Deployment ID and stage name are required"):
            instance.create_deployment({"restApiId": "a1", "type": "stage", "stageName": "prod"})
        client.create_stage.assert_not_called()

    def test_delete_stage(self, apigateway):
        instance, client = apigateway
        assert instance.delete_stage("a1", "dev") == {"success": True}
        client.delete_stage.assert_called_once_with(restApiId="a1", stageName="dev")

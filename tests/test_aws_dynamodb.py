from decimal import Decimal
import pytest
from botocore.exceptions import ClientError

from stackview.aws.dynamodb import DynamoDBService, deserialize_document, serialize_document
from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError, UpstreamError

KEY_SCHEMA = [{"AttributeName": "pk", "KeyType": "HASH"}]
ATTRIBUTES = [{"AttributeName": "pk", "AttributeType": "S"}]


def _client_error(code: str, message: str = "err") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "op")


@pytest.fixture
def dynamodb(mock_clients):
    yield DynamoDBService(mock_clients), mock_clients.dynamodb


class TestDocumentConversion:
    def test_serialize(self):
        assert serialize_document({"pk": "a", "n": 1, "f": 1.5, "ok": True}) == {
            "pk": {"S": "a"},
            "n": {"N": "1"},
            "f": {"N": "1.5"},
            "ok": {"BOOL": True},
        }

    def test_deserialize_narrows_numbers(self):
        doc = deserialize_document({"n": {"N": "2"}, "f": {"N": "2.5"}, "l": {"L": [{"S": "x"}]}})
        assert doc == {"n": 2, "f": 2.5, "l": ["x"]}
        assert not isinstance(doc["n"], Decimal)

    def test_none_passthrough(self):
        assert serialize_document(None) is None
        assert deserialize_document(None) is None

    def test_binary_is_base64(self):
        assert deserialize_document({"blob": {"B": b"abc"}}) == {"blob": "YWJj"}

    def test_binary_set(self):
        doc = deserialize_document({"blobs": {"BS": [b"a", b"b"]}})
        assert sorted(doc["blobs"]) == ["YQ==", "Yg=="]

    def test_serialize_rejects_non_object(self):
        with pytest.raises(InvalidRequestError, match="Item must be a JSON object"):
            serialize_document("x", "Item must be a JSON object")
        with pytest.raises(InvalidRequestError, match="Document must be a JSON object"):
            serialize_document(["pk"])


# --- Table operations ---


class TestListTables:
    def test_with_descriptions(self, dynamodb):
        instance, client = dynamodb
        client.list_tables.return_value = {"TableNames": ["users"]}
        client.describe_table.return_value = {
            "Table": {"TableName": "users", "TableStatus": "ACTIVE", "ItemCount": 3, "TableSizeBytes": 90},
        }
        assert instance.list_tables() == {
            "tables": [{"tableName": "users", "tableStatus": "ACTIVE", "itemCount": 3, "tableSizeBytes": 90}],
        }

    def test_failed_describe_yields_placeholder(self, dynamodb):
        instance, client = dynamodb
        client.list_tables.return_value = {"TableNames": ["broken", "users"]}
        client.describe_table.side_effect = [
            _client_error("InternalServerError"),
            {"Table": {"TableName": "users", "TableStatus": "ACTIVE"}},
        ]
        tables = instance.list_tables()["tables"]
        assert tables[0] == {
            "tableName": "broken",
            "tableStatus": "UNKNOWN",
            "itemCount": 0,
            "tableSizeBytes": 0,
        }
        assert tables[1]["tableStatus"] == "ACTIVE"


class TestCreateTable:
    def test_defaults_to_on_demand(self, dynamodb):
        instance, client = dynamodb
        client.create_table.return_value = {"TableDescription": {"TableName": "users"}}
        result = instance.create_table(
            "users", ATTRIBUTES, KEY_SCHEMA, provisioned_throughput={"ReadCapacityUnits": 5}
        )
        client.create_table.assert_called_once_with(
            TableName="users",
            AttributeDefinitions=ATTRIBUTES,
            KeySchema=KEY_SCHEMA,
            BillingMode="PAY_PER_REQUEST",
        )
        assert result["success"] is True

    def test_provisioned_passes_throughput(self, dynamodb):
        instance, client = dynamodb
        client.create_table.return_value = {}
        throughput = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}
        instance.create_table("users", ATTRIBUTES, KEY_SCHEMA, "PROVISIONED", throughput)
        assert client.create_table.call_args.kwargs["ProvisionedThroughput"] == throughput

    def test_requires_key_schema(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="key schema are required"):
            instance.create_table("users", ATTRIBUTES, None)
        client.create_table.assert_not_called()


class TestDescribeAndDelete:
    def test_describe(self, dynamodb):
        instance, client = dynamodb
        client.describe_table.return_value = {
            "Table": {"TableName": "users", "BillingModeSummary": {"BillingMode": "PAY_PER_REQUEST"}},
        }
        result = instance.describe_table("users")
        assert result["billingMode"] == "PAY_PER_REQUEST"
        assert "tableStatus" not in result

    def test_delete(self, dynamodb):
        instance, client = dynamodb
        assert instance.delete_table("users") == {"success": True}
        client.delete_table.assert_called_once_with(TableName="users")

    def test_delete_requires_name(self, dynamodb):
        instance, _ = dynamodb
        with pytest.raises(InvalidRequestError, match="Table name is required"):
            instance.delete_table(None)

    def test_update(self, dynamodb):
        instance, client = dynamodb
        client.update_table.return_value = {"TableDescription": {"TableName": "users"}}
        instance.update_table("users", stream_specification={"StreamEnabled": True})
        client.update_table.assert_called_once_with(
            TableName="users", StreamSpecification={"StreamEnabled": True}
        )


# --- Item operations ---


class TestFetchItems:
    def test_scan_defaults(self, dynamodb):
        instance, client = dynamodb
        client.scan.return_value = {"Items": [{"pk": {"S": "a"}}], "Count": 1, "ScannedCount": 1}
        result = instance.fetch_items("users")
        client.scan.assert_called_once_with(TableName="users", Limit=50)
        assert result == {"items": [{"pk": "a"}], "count": 1, "scannedCount": 1, "lastEvaluatedKey": None}

    def test_scan_with_start_key(self, dynamodb):
        instance, client = dynamodb
        client.scan.return_value = {"LastEvaluatedKey": {"pk": {"S": "b"}}}
        result = instance.fetch_items("users", limit="10", exclusive_start_key='{"pk": "a"}')
        assert client.scan.call_args.kwargs["ExclusiveStartKey"] == {"pk": {"S": "a"}}
        assert client.scan.call_args.kwargs["Limit"] == 10
        assert result["lastEvaluatedKey"] == {"pk": "b"}

    def test_query(self, dynamodb):
        instance, client = dynamodb
        client.query.return_value = {}
        instance.fetch_items(
            "users",
            "query",
            key_condition_expression="pk = :pk",
            expression_attribute_values='{":pk": "a"}',
        )
        kwargs = client.query.call_args.kwargs
        assert kwargs["KeyConditionExpression"] == "pk = :pk"
        assert kwargs["ExpressionAttributeValues"] == {":pk": {"S": "a"}}
        client.scan.assert_not_called()

    def test_query_requires_condition(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="Key condition expression is required"):
            instance.fetch_items("users", "query")
        client.query.assert_not_called()

    def test_bad_start_key(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="exclusiveStartKey"):
            instance.fetch_items("users", exclusive_start_key="{oops")
        client.scan.assert_not_called()

    def test_scan_missing_table_is_upstream_error(self, dynamodb):
        instance, client = dynamodb
        client.scan.side_effect = _client_error("ResourceNotFoundException", "Requested resource not found")
        with pytest.raises(UpstreamError) as exc:
            instance.fetch_items("gone")
        assert exc.value.status_code == 500


class TestItems:
    def test_put(self, dynamodb):
        instance, client = dynamodb
        result = instance.put_item("users", {"pk": "a", "age": 30})
        client.put_item.assert_called_once_with(
            TableName="users", Item={"pk": {"S": "a"}, "age": {"N": "30"}}
        )
        assert result == {"success": True, "item": {"pk": "a", "age": 30}}

    def test_get(self, dynamodb):
        instance, client = dynamodb
        client.get_item.return_value = {"Item": {"pk": {"S": "a"}}}
        assert instance.get_item("users", '{"pk": "a"}') == {"item": {"pk": "a"}}

    def test_get_missing(self, dynamodb):
        instance, client = dynamodb
        client.get_item.return_value = {}
        with pytest.raises(ResourceNotFoundError, match="Item not found"):
            instance.get_item("users", '{"pk": "zz"}')

    def test_get_bad_key(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="Invalid JSON in key"):
            instance.get_item("users", "pk=a")
        client.get_item.assert_not_called()

    def test_get_key_must_be_object(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="Key must be a JSON object"):
            instance.get_item("users", '["a"]')
        client.get_item.assert_not_called()

    def test_get_missing_table_is_404(self, dynamodb):
        instance, client = dynamodb
        client.get_item.side_effect = _client_error("ResourceNotFoundException", "Requested resource not found")
        with pytest.raises(ResourceNotFoundError) as exc:
            instance.get_item("gone", '{"pk": "a"}')
        assert exc.value.status_code == 404

    def test_put_rejects_non_object(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="Item must be a JSON object"):
            instance.put_item("users", "x")
        client.put_item.assert_not_called()

    def test_update_values_must_be_object(self, dynamodb):
        instance, client = dynamodb
        with pytest.raises(InvalidRequestError, match="expressionAttributeValues must be an object"):
            instance.update_item("users", {"pk": "a"}, "SET n = :n", expression_attribute_values=[2])
        client.update_item.assert_not_called()

    def test_update_returns_all_new(self, dynamodb):
        instance, client = dynamodb
        client.update_item.return_value = {"Attributes": {"pk": {"S": "a"}, "n": {"N": "2"}}}
        result = instance.update_item(
            "users", {"pk": "a"}, "SET n = :n", expression_attribute_values={":n": 2}
        )
        kwargs = client.update_item.call_args.kwargs
        assert kwargs["ReturnValues"] == "ALL_NEW"
        assert kwargs["ExpressionAttributeValues"] == {":n": {"N": "2"}}
        assert result == {"success": True, "item": {"pk": "a", "n": 2}}

    def test_delete(self, dynamodb):
        instance, client = dynamodb
        assert instance.delete_item("users", '{"pk": "a"}') == {"success": True}
        client.delete_item.assert_called_once_with(TableName="users", Key={"pk": {"S": "a"}})

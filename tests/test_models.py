import pytest

from swagger_gen.model.openapi import (
    Document,
    Info,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Response,
    Schema,
)


class TestSchema:
    def test_reference(self):
        schema = Schema.reference("Item")

        assert schema.ref == "#/components/schemas/Item"
        assert schema.reference_id == "Item"

    def test_external_reference_kept_whole(self):
        assert Schema(ref="common.json#/Item").reference_id == "common.json#/Item"

    def test_inline_schema_has_no_reference(self):
        assert Schema(type="string").reference_id is None

    def test_recursive_properties(self):
        schema = Schema(type="object", properties={"child": Schema(type="object", properties={})})

        assert schema.properties["child"].type == "object"


class TestParameter:
    def test_populate_by_name_or_alias(self):
        by_name = Parameter(name="q", in_="query", schema_=Schema(type="string"))
        by_alias = Parameter.model_validate({"name": "q", "in": "query", "schema": {"type": "string"}})

        assert by_name == by_alias

    def test_dump_uses_aliases(self):
        parameter = Parameter(name="id", in_="path", required=True)

        assert parameter.model_dump(by_alias=True, exclude_none=True) == {
            "name": "id", "in": "path", "required": True,
        }


class TestPathItem:
    def test_set_operation_is_case_insensitive(self):
        path_item = PathItem()
        operation = Operation(operation_id="GetItem")

        path_item.set_operation("GET", operation)

        assert path_item.get is operation

    def test_unsupported_method(self):
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            PathItem().set_operation("CONNECT", Operation())

    def test_operations_in_method_order(self):
        path_item = PathItem()
        path_item.set_operation("delete", Operation(operation_id="Delete"))
        path_item.set_operation("get", Operation(operation_id="Get"))

        assert list(path_item.operations()) == ["GET", "DELETE"]


class TestDocument:
    def test_defaults(self):
        document = Document(info=Info(title="API", version="v1"))

        assert document.openapi == "3.0.1"
        assert document.paths == {}
        assert document.components is None

    def test_response_content_dump(self):
        response = Response(description="OK", content={"application/json": MediaType(schema_=Schema(type="integer"))})

        assert response.model_dump(by_alias=True, exclude_none=True) == {
            "description": "OK",
            "content": {"application/json": {"schema": {"type": "integer"}}},
        }

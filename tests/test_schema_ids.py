from typing import Any, Optional

import pytest

from api_fixtures import Item, Page, Pair, Tree
from swagger_gen.errors import SchemaIdConflictError
from swagger_gen.generator.schema_ids import SchemaIdManager, default_schema_id, friendly_id, full_schema_id


class TestFriendlyId:
    def test_plain_class(self):
        assert default_schema_id(Item) == "Item"

    def test_generic_arguments_are_flattened(self):
        assert default_schema_id(Page[Item]) == "PageOfItem"
        assert default_schema_id(Pair[int, str]) == "PairOfIntAndStr"

    def test_nested_generics(self):
        assert default_schema_id(Page[Pair[int, Item]]) == "PageOfPairOfIntAndItem"

    def test_wrappers_are_ignored(self):
        assert friendly_id(Optional[Item]) == "Item"

    def test_object(self):
        assert friendly_id(Any) == "Object"
        assert friendly_id(object) == "Object"

    def test_full_name_includes_module(self):
        assert full_schema_id(Item) == "api_fixtures.Item"
        assert full_schema_id(Tree) == "api_fixtures.Tree"


class TestSchemaIdManager:
    def test_ids_are_memoized(self):
        calls = []

        def selector(type_):
            calls.append(type_)
            return type_.__name__

        manager = SchemaIdManager(selector)
        assert manager.id_for(Item) == "Item"
        assert manager.id_for(Item) == "Item"
        assert calls == [Item]

    def test_second_type_cannot_claim_an_id(self):
        manager = SchemaIdManager(lambda type_: "Same")
        manager.id_for(Item)

        with pytest.raises(SchemaIdConflictError) as exc_info:
            manager.id_for(Tree)

        assert exc_info.value.schema_id == "Same"
        assert exc_info.value.existing_type is Item
        assert exc_info.value.conflicting_type is Tree

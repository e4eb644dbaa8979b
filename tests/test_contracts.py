from typing import Annotated, Any, ForwardRef, Literal, Optional, TypedDict

from api_fixtures import Bag, Cart, Color, Item, Pair, Status, Tree
from swagger_gen.contracts import ContractKind, ContractResolver, annotated_metadata, resolve_forward, unwrap_type


class Address(TypedDict, total=False):
    street: str
    city: str


class Point:
    x: int
    y: int = 0
    _hidden: str


class Dangling:
    item: "Item"
    later: "NotDefinedAnywhere"
    count: int


class TestUnwrap:
    def test_optional_and_annotated(self):
        assert unwrap_type(Optional[int]) is int
        assert unwrap_type(int | None) is int
        assert unwrap_type(Annotated[Optional[Item], "meta"]) is Item

    def test_real_unions_are_kept(self):
        assert unwrap_type(int | str) == int | str

    def test_metadata_through_optional(self):
        assert annotated_metadata(Optional[Annotated[int, "a", "b"]]) == ["a", "b"]


class TestContractKinds:
    def setup_method(self):
        self.resolver = ContractResolver()

    def test_primitives(self):
        assert self.resolver.resolve_contract(int).kind == ContractKind.PRIMITIVE
        assert self.resolver.resolve_contract(bytes).kind == ContractKind.PRIMITIVE
        assert self.resolver.resolve_contract(Literal["a", "b"]).underlying_type is str

    def test_enums(self):
        assert self.resolver.resolve_contract(Color).string_enum is False
        assert self.resolver.resolve_contract(Status).string_enum is True

    def test_collections(self):
        contract = self.resolver.resolve_contract(list[Item])
        assert contract.kind == ContractKind.ARRAY
        assert contract.item_type is Item

        assert self.resolver.resolve_contract(set[int]).kind == ContractKind.ARRAY
        assert self.resolver.resolve_contract(tuple[int, ...]).item_type is int

    def test_list_subclass_item_type(self):
        contract = self.resolver.resolve_contract(Tree)

        assert contract.kind == ContractKind.ARRAY
        assert contract.item_type is Tree

    def test_dictionaries(self):
        contract = self.resolver.resolve_contract(dict[str, Item])

        assert contract.kind == ContractKind.DICTIONARY
        assert (contract.key_type, contract.value_type) == (str, Item)

    def test_dynamic(self):
        assert self.resolver.resolve_contract(Any).kind == ContractKind.DYNAMIC
        assert self.resolver.resolve_contract(int | str).kind == ContractKind.DYNAMIC

    def test_contracts_are_memoized(self):
        assert self.resolver.resolve_contract(Item) is self.resolver.resolve_contract(Item)


class TestObjectContracts:
    def setup_method(self):
        self.resolver = ContractResolver()

    def test_dataclass_properties(self):
        contract = self.resolver.resolve_contract(Item)

        assert contract.kind == ContractKind.OBJECT
        assert [(p.name, p.required) for p in contract.properties] == [
            ("id", True), ("name", True), ("price", False),
        ]

    def test_generic_dataclass_parameters_are_substituted(self):
        contract = self.resolver.resolve_contract(Pair[int, Item])

        assert [p.property_type for p in contract.properties] == [int, Item]

    def test_pydantic_alias_exclude_and_constraints(self):
        properties = {p.underlying_name: p for p in self.resolver.resolve_contract(Cart).properties}

        assert properties["owner"].name == "ownerName"
        assert properties["secret"].ignored is True
        assert properties["id"].validation == {"minimum": 1}

    def test_pydantic_extra_allow(self):
        assert self.resolver.resolve_contract(Bag).extension_data_type is Any

    def test_typed_dict(self):
        contract = self.resolver.resolve_contract(Address)

        assert contract.kind == ContractKind.OBJECT
        assert [(p.name, p.required) for p in contract.properties] == [("street", False), ("city", False)]

    def test_annotated_class(self):
        contract = self.resolver.resolve_contract(Point)

        assert [(p.name, p.required) for p in contract.properties] == [("x", True), ("y", False)]

    def test_camel_case_names(self):
        resolver = ContractResolver(camel_case_properties=True)

        assert resolver.property_name("order_id") == "orderId"
        assert resolver.resolve_contract(dict[Color, int]).key_resolver("RED") == "red"


class TestForwardReferences:
    def test_names_are_looked_up_in_the_owner_module(self):
        assert resolve_forward("Item", Cart) is Item
        assert resolve_forward(ForwardRef("Item"), Cart) is Item
        assert resolve_forward("Cart", Cart) is Cart

    def test_unknown_names_and_expressions_are_any(self):
        assert resolve_forward("Missing", Cart) is Any
        assert resolve_forward("__import__('os').getcwd()", Cart) is Any

    def test_unresolvable_annotation_keeps_the_others(self):
        properties = {p.name: p.property_type for p in ContractResolver().resolve_contract(Dangling).properties}

        assert properties == {"item": Item, "later": Any, "count": int}

    def test_local_self_reference(self):
        class Chain:
            value: int
            next: "Chain | None" = None

        properties = {p.name: p.property_type for p in ContractResolver().resolve_contract(Chain).properties}

        assert unwrap_type(properties["next"]) is Chain

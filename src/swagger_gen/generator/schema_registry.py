"""Schema registry: runtime types -> JSON-Schema nodes.

Object types, self-referencing collections and (optionally) enums are
stored once in ``definitions`` and handed out as ``$ref`` nodes; every
other type is described inline. A registry lives for exactly one document
generation.
"""

import datetime
import decimal
import logging
import uuid
from collections import deque
from enum import Enum
from typing import Any

from swagger_gen import types as sized
from swagger_gen.contracts import ContractKind, ContractResolver, JsonContract, JsonProperty, unwrap_type
from swagger_gen.generator.filters import SchemaFilterContext
from swagger_gen.generator.schema_ids import SchemaIdManager
from swagger_gen.generator.settings import SchemaRegistrySettings
from swagger_gen.model.openapi import Schema
from swagger_gen.naming import to_camel_case

logger = logging.getLogger(__name__)

PRIMITIVE_TYPE_MAP: dict[Any, tuple[str, str | None]] = {
    sized.Int16: ("integer", "int32"),
    sized.UInt16: ("integer", "int32"),
    sized.Int32: ("integer", "int32"),
    sized.UInt32: ("integer", "int32"),
    int: ("integer", "int32"),
    sized.Int64: ("integer", "int64"),
    sized.UInt64: ("integer", "int64"),
    sized.Float32: ("number", "float"),
    sized.Float64: ("number", "double"),
    float: ("number", "double"),
    decimal.Decimal: ("number", "double"),
    sized.Byte: ("integer", "int32"),
    sized.SByte: ("integer", "int32"),
    bytes: ("string", "byte"),
    bytearray: ("string", "byte"),
    memoryview: ("string", "byte"),
    sized.SByteArray: ("string", "byte"),
    bool: ("boolean", None),
    datetime.datetime: ("string", "date-time"),
    datetime.date: ("string", "date-time"),
    uuid.UUID: ("string", "uuid"),
}


class SchemaRegistry:
    def __init__(
        self,
        contract_resolver: ContractResolver | None = None,
        settings: SchemaRegistrySettings | None = None,
    ):
        self.contract_resolver = contract_resolver or ContractResolver()
        self._settings = settings or SchemaRegistrySettings()
        self._schema_id_manager = SchemaIdManager(self._settings.schema_id_selector)
        # None marks a definition that is still being built
        self.definitions: dict[str, Schema | None] = {}

    def get_or_register(self, type_) -> Schema:
        """Return a schema for ``type_``, registering definitions as needed."""
        referenced_types: deque = deque()
        schema = self._create_schema(type_, referenced_types)

        while referenced_types:
            referenced_type = referenced_types.popleft()
            schema_id = self._schema_id_manager.id_for(referenced_type)
            if schema_id in self.definitions:
                continue

            # The placeholder must be written before building: a nested
            # get_or_register for the same type then finds the key taken.
            self.definitions[schema_id] = None
            self.definitions[schema_id] = self._create_inline_schema(referenced_type, referenced_types)
            logger.debug("Registered schema definition %s", schema_id)

        return schema

    # -- reference vs inline --------------------------------------------------

    def _create_schema(self, type_, referenced_types: deque, string_enum: bool | None = None) -> Schema:
        type_ = unwrap_type(type_)
        contract = self.contract_resolver.resolve_contract(type_)

        create_reference = (
            self._custom_mapping(type_) is None
            and contract.kind != ContractKind.DYNAMIC
            and (
                contract.kind == ContractKind.OBJECT
                or self._is_self_referencing(type_, contract)
                or (contract.kind == ContractKind.ENUM and self._settings.use_referenced_definitions_for_enums)
            )
        )

        if create_reference:
            referenced_types.append(type_)
            return Schema.reference(self._schema_id_manager.id_for(type_))
        return self._create_inline_schema(type_, referenced_types, string_enum)

    def _create_inline_schema(self, type_, referenced_types: deque, string_enum: bool | None = None) -> Schema:
        contract = self.contract_resolver.resolve_contract(type_)

        custom_mapping = self._custom_mapping(type_)
        if custom_mapping is not None:
            schema = custom_mapping()
        elif contract.kind == ContractKind.PRIMITIVE:
            schema = self._create_primitive_schema(contract)
        elif contract.kind == ContractKind.ENUM:
            schema = self._create_enum_schema(contract, string_enum)
        elif contract.kind == ContractKind.DICTIONARY:
            schema = self._create_dictionary_schema(contract, referenced_types)
        elif contract.kind == ContractKind.ARRAY:
            schema = self._create_array_schema(contract, referenced_types)
        elif contract.kind == ContractKind.OBJECT:
            schema = self._create_object_schema(contract, referenced_types)
        else:
            schema = Schema(type="object")

        filter_context = SchemaFilterContext(type_, contract, self)
        for schema_filter in self._settings.schema_filters:
            schema_filter.apply(schema, filter_context)

        return schema

    def _custom_mapping(self, type_):
        try:
            return self._settings.custom_type_mappings.get(type_)
        except TypeError:
            return None

    def _is_self_referencing(self, type_, contract: JsonContract) -> bool:
        """True if ``type_`` is reachable from its own items / values."""
        if contract.kind not in (ContractKind.ARRAY, ContractKind.DICTIONARY):
            return False

        seen = []
        pending = [_element_type(contract)]
        while pending:
            candidate = pending.pop()
            if candidate is None:
                continue
            candidate = unwrap_type(candidate)
            if candidate == type_:
                return True
            if candidate in seen:
                continue
            seen.append(candidate)
            candidate_contract = self.contract_resolver.resolve_contract(candidate)
            if candidate_contract.kind in (ContractKind.ARRAY, ContractKind.DICTIONARY):
                pending.append(_element_type(candidate_contract))
        return False

    # -- shapes ---------------------------------------------------------------

    def _create_primitive_schema(self, contract: JsonContract) -> Schema:
        type_ = contract.underlying_type
        while True:
            entry = PRIMITIVE_TYPE_MAP.get(type_)
            if entry is not None:
                return Schema(type=entry[0], format=entry[1])
            if not hasattr(type_, "__supertype__"):
                break
            type_ = type_.__supertype__

        return Schema(type="string")

    def _create_enum_schema(self, contract: JsonContract, string_enum: bool | None) -> Schema:
        resolver = self.contract_resolver
        describe_as_strings = (
            self._settings.describe_all_enums_as_strings
            or contract.string_enum
            or resolver.string_enums
            or bool(string_enum)
        )
        if not describe_as_strings:
            return Schema(type="integer", format="int32")

        camel_case = (
            self._settings.describe_string_enums_in_camel_case
            or contract.camel_case_text
            or (resolver.string_enums and resolver.camel_case_enum_text)
        )
        names = []
        for member in contract.underlying_type:
            # a string value is the member's explicit wire name
            name = member.value if isinstance(member.value, str) else member.name
            names.append(to_camel_case(name) if camel_case else name)
        return Schema(type="string", enum=names)

    def _create_dictionary_schema(self, contract: JsonContract, referenced_types: deque) -> Schema:
        key_type = unwrap_type(contract.key_type) if contract.key_type is not None else Any
        value_type = contract.value_type if contract.value_type is not None else Any

        if isinstance(key_type, type) and issubclass(key_type, Enum):
            key_resolver = contract.key_resolver or (lambda name: name)
            return Schema(
                type="object",
                properties={
                    key_resolver(member.name): self._create_schema(value_type, referenced_types)
                    for member in key_type
                },
            )

        return Schema(
            type="object",
            additional_properties=self._create_schema(value_type, referenced_types),
        )

    def _create_array_schema(self, contract: JsonContract, referenced_types: deque) -> Schema:
        item_type = contract.item_type if contract.item_type is not None else Any
        return Schema(type="array", items=self._create_schema(item_type, referenced_types))

    def _create_object_schema(self, contract: JsonContract, referenced_types: deque) -> Schema:
        properties = [
            prop for prop in contract.properties
            if not prop.ignored
            and not (self._settings.ignore_obsolete_properties and prop.obsolete)
        ]
        required = [prop.name for prop in properties if prop.required]

        return Schema(
            type="object",
            properties={prop.name: self._create_property_schema(prop, referenced_types) for prop in properties},
            required=required or None,  # never empty
            additional_properties=Schema(type="object") if contract.extension_data_type is not None else None,
        )

    def _create_property_schema(self, prop: JsonProperty, referenced_types: deque) -> Schema:
        schema = self._create_schema(prop.property_type, referenced_types, prop.string_enum)
        if schema.ref is None:
            _assign_validation_properties(schema, prop)
        return schema


class SchemaRegistryFactory:
    """Creates one fresh registry per generated document."""

    def __init__(
        self,
        contract_resolver: ContractResolver | None = None,
        settings: SchemaRegistrySettings | None = None,
    ):
        self._contract_resolver = contract_resolver or ContractResolver()
        self._settings = settings or SchemaRegistrySettings()

    def create(self) -> SchemaRegistry:
        return SchemaRegistry(self._contract_resolver, self._settings)


def _element_type(contract: JsonContract):
    return contract.item_type if contract.kind == ContractKind.ARRAY else contract.value_type


def _assign_validation_properties(schema: Schema, prop: JsonProperty) -> None:
    validation = prop.validation
    if "minimum" in validation:
        schema.minimum = validation["minimum"]
    if "maximum" in validation:
        schema.maximum = validation["maximum"]
    if validation.get("exclusive_minimum"):
        schema.exclusive_minimum = True
    if validation.get("exclusive_maximum"):
        schema.exclusive_maximum = True
    if schema.type == "array":
        if "min_length" in validation:
            schema.min_items = validation["min_length"]
        if "max_length" in validation:
            schema.max_items = validation["max_length"]
    else:
        if "min_length" in validation:
            schema.min_length = validation["min_length"]
        if "max_length" in validation:
            schema.max_length = validation["max_length"]
    if "pattern" in validation:
        schema.pattern = validation["pattern"]
    if prop.description:
        schema.description = prop.description

"""JSON contract introspection.

A ``ContractResolver`` looks at a runtime type and describes how it is
serialized: as a primitive value, an enum, an array, a dictionary, an
object with named properties, or an untyped ("dynamic") value. The schema
registry dispatches on ``JsonContract.kind`` and never inspects types
itself.

Supported shapes:
  - builtins, ``Decimal``, ``datetime``/``date``, ``UUID``, the sized
    markers in ``swagger_gen.types`` and other ``NewType`` aliases
  - ``Enum`` subclasses (a ``str`` mixin means the enum serializes as text)
  - sequences, sets, tuples and ``list`` subclasses -> arrays
  - mappings -> dictionaries
  - dataclasses, pydantic models, ``TypedDict`` and annotated classes -> objects
"""

import dataclasses
import datetime
import decimal
import enum
import inspect
import ipaddress
import pathlib
import sys
import types
import uuid
from collections import abc
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    ForwardRef,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from pydantic import BaseModel, ConfigDict, Field

from swagger_gen import types as sized
from swagger_gen.naming import to_camel_case

PRIMITIVE_TYPES = frozenset({
    str, int, float, bool, bytes, bytearray, memoryview, complex,
    decimal.Decimal, uuid.UUID,
    datetime.datetime, datetime.date, datetime.time, datetime.timedelta,
    sized.Int16, sized.UInt16, sized.Int32, sized.UInt32, sized.Int64, sized.UInt64,
    sized.Byte, sized.SByte, sized.Float32, sized.Float64, sized.SByteArray,
})

STRING_LIKE_TYPES = (
    pathlib.PurePath,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
)

VALIDATION_KEYS = (
    "minimum", "maximum", "exclusive_minimum", "exclusive_maximum",
    "min_length", "max_length", "pattern",
)


class ContractKind(str, enum.Enum):
    PRIMITIVE = "primitive"
    ENUM = "enum"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    OBJECT = "object"
    DYNAMIC = "dynamic"


class JsonProperty(BaseModel):
    """One serialized member of an object contract."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    underlying_name: str
    property_type: Any = None
    required: bool = False
    ignored: bool = False
    obsolete: bool = False
    string_enum: bool | None = None
    description: str | None = None
    validation: dict[str, Any] = Field(default_factory=dict)


class JsonContract(BaseModel):
    """Serialization shape of one runtime type."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: ContractKind
    underlying_type: Any = None
    item_type: Any = None
    key_type: Any = None
    value_type: Any = None
    key_resolver: Callable[[str], str] | None = None
    properties: list[JsonProperty] = Field(default_factory=list)
    extension_data_type: Any = None
    string_enum: bool = False
    camel_case_text: bool = False


def unwrap_type(type_):
    """Strip ``Annotated[...]`` and ``Optional[...]`` wrappers."""
    while True:
        origin = get_origin(type_)
        if origin is Annotated:
            type_ = get_args(type_)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(type_) if a is not type(None)]
            if len(members) == 1:
                type_ = members[0]
                continue
        return type_


def annotated_metadata(type_) -> list[Any]:
    """Collect ``Annotated`` metadata through ``Optional`` wrappers."""
    metadata: list[Any] = []
    while True:
        origin = get_origin(type_)
        if origin is Annotated:
            inner, *extras = get_args(type_)
            metadata.extend(extras)
            type_ = inner
            continue
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(type_) if a is not type(None)]
            if len(members) == 1:
                type_ = members[0]
                continue
        return metadata


def constraints_from_metadata(metadata) -> dict[str, Any]:
    """Translate annotated-types style constraints into validation keys."""
    validation: dict[str, Any] = {}
    for item in metadata:
        if getattr(item, "ge", None) is not None:
            validation["minimum"] = item.ge
        if getattr(item, "gt", None) is not None:
            validation["minimum"] = item.gt
            validation["exclusive_minimum"] = True
        if getattr(item, "le", None) is not None:
            validation["maximum"] = item.le
        if getattr(item, "lt", None) is not None:
            validation["maximum"] = item.lt
            validation["exclusive_maximum"] = True
        if getattr(item, "min_length", None) is not None:
            validation["min_length"] = item.min_length
        if getattr(item, "max_length", None) is not None:
            validation["max_length"] = item.max_length
        pattern = getattr(item, "pattern", None)
        if pattern is not None:
            validation["pattern"] = getattr(pattern, "pattern", pattern)
    return validation


def resolve_forward(ref, owner: type):
    """Look up a string / ``ForwardRef`` annotation by name; unknown names are ``Any``."""
    name = ref.__forward_arg__ if isinstance(ref, ForwardRef) else ref
    if name == owner.__name__:
        return owner
    module = sys.modules.get(owner.__module__)
    return vars(module).get(name, Any) if module else Any


def substitute_type_vars(type_, mapping: dict):
    if not mapping:
        return type_
    if isinstance(type_, TypeVar):
        return mapping.get(type_, Any)
    parameters = getattr(type_, "__parameters__", ())
    if parameters and not isinstance(type_, type):
        try:
            return type_[tuple(mapping.get(p, Any) for p in parameters)]
        except TypeError:
            return type_
    return type_


class ContractResolver:
    """Resolves and caches the ``JsonContract`` of runtime types."""

    def __init__(
        self,
        camel_case_properties: bool = False,
        string_enums: bool = False,
        camel_case_enum_text: bool = False,
    ):
        self.camel_case_properties = camel_case_properties
        # serializer-wide string enum converter
        self.string_enums = string_enums
        self.camel_case_enum_text = camel_case_enum_text
        self._cache: dict[Any, JsonContract] = {}

    def resolve_contract(self, type_) -> JsonContract:
        try:
            cached = self._cache.get(type_)
        except TypeError:
            return self._create_contract(type_)
        if cached is None:
            cached = self._create_contract(type_)
            self._cache[type_] = cached
        return cached

    def property_name(self, name: str) -> str:
        return to_camel_case(name) if self.camel_case_properties else name

    # -- classification -------------------------------------------------------

    def _create_contract(self, type_) -> JsonContract:
        type_ = unwrap_type(type_)

        if type_ is Any or type_ is object or type_ is type(None):
            return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=type_)
        if isinstance(type_, (TypeVar, ForwardRef, str)):
            return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=Any)

        origin = get_origin(type_)
        args = get_args(type_)

        if origin is Literal:
            literal_type = type(args[0]) if args else str
            return JsonContract(kind=ContractKind.PRIMITIVE, underlying_type=literal_type)

        # unions of several types have no single shape
        if origin is Union or origin is types.UnionType:
            return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=type_)

        if hasattr(type_, "__supertype__"):
            if self._is_primitive(type_):
                return JsonContract(kind=ContractKind.PRIMITIVE, underlying_type=type_)
            return self._create_contract(type_.__supertype__)

        if isinstance(type_, type) and issubclass(type_, enum.Enum):
            return JsonContract(
                kind=ContractKind.ENUM,
                underlying_type=type_,
                string_enum=issubclass(type_, str),
            )

        if self._is_primitive(type_):
            return JsonContract(kind=ContractKind.PRIMITIVE, underlying_type=type_)

        if origin is not None:
            return self._create_generic_contract(type_, origin, args)

        if isinstance(type_, type):
            return self._create_class_contract(type_)

        return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=type_)

    def _is_primitive(self, type_) -> bool:
        while hasattr(type_, "__supertype__"):
            if type_ in PRIMITIVE_TYPES:
                return True
            type_ = type_.__supertype__
        if type_ in PRIMITIVE_TYPES:
            return True
        return isinstance(type_, type) and issubclass(type_, STRING_LIKE_TYPES)

    def _create_generic_contract(self, type_, origin, args) -> JsonContract:
        if not isinstance(origin, type):
            return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=type_)

        if issubclass(origin, abc.Mapping) and not is_typeddict(origin):
            return self._dictionary_contract(
                type_,
                args[0] if args else None,
                args[1] if len(args) > 1 else None,
            )

        if origin is tuple:
            item_types = [a for a in args if a is not Ellipsis]
            item_type = item_types[0] if item_types and len(set(item_types)) == 1 else None
            return JsonContract(kind=ContractKind.ARRAY, underlying_type=type_, item_type=item_type)

        if self._is_collection(origin) and not self._is_object_class(origin):
            return JsonContract(
                kind=ContractKind.ARRAY,
                underlying_type=type_,
                item_type=args[0] if args else None,
            )

        # generic model class, e.g. Page[Item]
        mapping = dict(zip(getattr(origin, "__parameters__", ()), args))
        return self._object_contract(type_, origin, mapping)

    def _create_class_contract(self, type_: type) -> JsonContract:
        if is_typeddict(type_) or self._is_object_class(type_):
            return self._object_contract(type_, type_, {})

        if issubclass(type_, abc.Mapping):
            key_type, value_type = (self._generic_base_args(type_, abc.Mapping) + (None, None))[:2]
            return self._dictionary_contract(type_, key_type, value_type)

        if self._is_collection(type_):
            item_args = self._generic_base_args(type_, abc.Iterable)
            return JsonContract(
                kind=ContractKind.ARRAY,
                underlying_type=type_,
                item_type=item_args[0] if item_args else None,
            )

        if self._has_annotations(type_):
            return self._object_contract(type_, type_, {})

        return JsonContract(kind=ContractKind.DYNAMIC, underlying_type=type_)

    @staticmethod
    def _is_object_class(type_: type) -> bool:
        return dataclasses.is_dataclass(type_) or issubclass(type_, BaseModel)

    @staticmethod
    def _is_collection(type_: type) -> bool:
        return issubclass(type_, abc.Iterable) and not issubclass(type_, (str, bytes, bytearray))

    @staticmethod
    def _has_annotations(type_: type) -> bool:
        return any(inspect.get_annotations(klass) for klass in type_.__mro__ if klass is not object)

    @staticmethod
    def _generic_base_args(type_: type, base) -> tuple:
        for klass in type_.__mro__:
            for orig_base in getattr(klass, "__orig_bases__", ()):
                origin = get_origin(orig_base)
                if isinstance(origin, type) and issubclass(origin, base):
                    return tuple(
                        resolve_forward(a, type_) if isinstance(a, (str, ForwardRef)) else a
                        for a in get_args(orig_base)
                    )
        return ()

    def _dictionary_contract(self, type_, key_type, value_type) -> JsonContract:
        return JsonContract(
            kind=ContractKind.DICTIONARY,
            underlying_type=type_,
            key_type=key_type,
            value_type=value_type,
            key_resolver=self.property_name,
        )

    # -- object contracts -----------------------------------------------------

    def _object_contract(self, type_, cls: type, mapping: dict) -> JsonContract:
        extension_data_type = None
        if issubclass(cls, BaseModel):
            properties = self._pydantic_properties(cls)
            if cls.model_config.get("extra") == "allow":
                extension_data_type = Any
        elif dataclasses.is_dataclass(cls):
            properties, extension_data_type = self._dataclass_properties(cls, mapping)
        elif is_typeddict(cls):
            properties = self._typeddict_properties(cls, mapping)
        else:
            properties = self._class_properties(cls, mapping)

        return JsonContract(
            kind=ContractKind.OBJECT,
            underlying_type=type_,
            properties=properties,
            extension_data_type=extension_data_type,
        )

    def _type_hints(self, cls: type) -> dict[str, Any]:
        try:
            return get_type_hints(cls, localns={cls.__name__: cls}, include_extras=True)
        except (NameError, TypeError):
            hints: dict[str, Any] = {}
            for klass in reversed(cls.__mro__):
                if klass is not object:
                    hints.update(inspect.get_annotations(klass))
            return {
                name: resolve_forward(hint, cls) if isinstance(hint, (str, ForwardRef)) else hint
                for name, hint in hints.items()
            }

    def _pydantic_properties(self, cls: type[BaseModel]) -> list[JsonProperty]:
        properties = []
        for field_name, info in cls.model_fields.items():
            alias = info.serialization_alias or info.alias
            properties.append(JsonProperty(
                name=alias or self.property_name(field_name),
                underlying_name=field_name,
                property_type=info.annotation,
                required=info.is_required(),
                ignored=info.exclude is True,
                obsolete=bool(getattr(info, "deprecated", None)),
                description=info.description,
                validation=constraints_from_metadata(info.metadata),
            ))
        return properties

    def _dataclass_properties(self, cls: type, mapping: dict):
        hints = self._type_hints(cls)
        properties = []
        extension_data_type = None
        for f in dataclasses.fields(cls):
            meta = f.metadata
            hint = substitute_type_vars(hints.get(f.name, f.type), mapping)
            if meta.get("extension_data"):
                extension_data_type = hint
                continue
            has_default = (
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            )
            validation = constraints_from_metadata(annotated_metadata(hint))
            validation.update({k: meta[k] for k in VALIDATION_KEYS if k in meta})
            properties.append(JsonProperty(
                name=meta.get("name") or self.property_name(f.name),
                underlying_name=f.name,
                property_type=hint,
                required=meta.get("required", not has_default),
                ignored=meta.get("ignore", False),
                obsolete=meta.get("obsolete", False),
                string_enum=meta.get("string_enum"),
                description=meta.get("description"),
                validation=validation,
            ))
        return properties, extension_data_type

    def _typeddict_properties(self, cls: type, mapping: dict) -> list[JsonProperty]:
        hints = self._type_hints(cls)
        required_keys = getattr(cls, "__required_keys__", frozenset(hints))
        return [
            JsonProperty(
                name=self.property_name(name),
                underlying_name=name,
                property_type=substitute_type_vars(hint, mapping),
                required=name in required_keys,
                validation=constraints_from_metadata(annotated_metadata(hint)),
            )
            for name, hint in hints.items()
        ]

    def _class_properties(self, cls: type, mapping: dict) -> list[JsonProperty]:
        properties = []
        for name, hint in self._type_hints(cls).items():
            if name.startswith("_") or get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            properties.append(JsonProperty(
                name=self.property_name(name),
                underlying_name=name,
                property_type=substitute_type_vars(hint, mapping),
                required=not hasattr(cls, name),
                validation=constraints_from_metadata(annotated_metadata(hint)),
            ))
        return properties

"""Stable identifiers for types stored in the shared definitions table."""

from typing import Any, get_args, get_origin

from swagger_gen.contracts import unwrap_type
from swagger_gen.errors import SchemaIdConflictError
from swagger_gen.naming import to_title_case


def _generic_parts(type_):
    metadata = getattr(type_, "__pydantic_generic_metadata__", None)
    if metadata and metadata.get("origin") is not None:
        return metadata["origin"], tuple(metadata.get("args", ()))
    origin = get_origin(type_)
    if origin is not None:
        return origin, get_args(type_)
    return type_, ()


def friendly_id(type_, fully_qualified: bool = False) -> str:
    """Readable identifier for ``type_``.

    Generic arguments are flattened into the name: ``Page[Item]`` becomes
    ``PageOfItem`` and ``Pair[int, str]`` becomes ``PairOfIntAndStr``.
    """
    type_ = unwrap_type(type_)
    if type_ is Any or type_ is object:
        return "Object"

    base, args = _generic_parts(type_)
    if fully_qualified:
        qualname = getattr(base, "__qualname__", None) or getattr(base, "__name__", repr(base))
        name = f"{getattr(base, '__module__', '')}.{qualname}".lstrip(".")
        name = name.replace("<locals>.", "")
    else:
        name = getattr(base, "__name__", None) or getattr(base, "_name", None) or repr(base)

    if args:
        arg_ids = [friendly_id(a, fully_qualified) for a in args if a is not Ellipsis]
        if not fully_qualified:
            arg_ids = [to_title_case(a) for a in arg_ids]
        name += "Of" + "And".join(arg_ids)
    return name


def default_schema_id(type_) -> str:
    return friendly_id(type_)


def full_schema_id(type_) -> str:
    return friendly_id(type_, fully_qualified=True)


class SchemaIdManager:
    """Memoizes ids per registry and refuses to give one id to two types."""

    def __init__(self, schema_id_selector=default_schema_id):
        self._schema_id_selector = schema_id_selector
        self._ids_by_type: dict[Any, str] = {}
        self._types_by_id: dict[str, Any] = {}

    def id_for(self, type_) -> str:
        if type_ in self._ids_by_type:
            return self._ids_by_type[type_]

        schema_id = self._schema_id_selector(type_)
        if schema_id in self._types_by_id and self._types_by_id[schema_id] != type_:
            raise SchemaIdConflictError(schema_id, self._types_by_id[schema_id], type_)

        self._ids_by_type[type_] = schema_id
        self._types_by_id[schema_id] = type_
        return schema_id

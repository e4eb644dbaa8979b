"""Extension points applied while a document is generated.

Filters of each kind run in registration order. Each one may mutate the
element it receives; later filters see the changes of earlier ones.
Exceptions raised by a filter abort the whole generation call.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from swagger_gen.contracts import JsonContract
from swagger_gen.model.openapi import Document, Operation, Schema
from swagger_gen.model.routes import ApiDescription

if TYPE_CHECKING:
    from swagger_gen.generator.schema_registry import SchemaRegistry


@dataclass
class SchemaFilterContext:
    system_type: Any
    json_contract: JsonContract | None
    schema_registry: "SchemaRegistry | None"


@dataclass
class OperationFilterContext:
    api_description: ApiDescription
    schema_registry: "SchemaRegistry | None"


@dataclass
class DocumentFilterContext:
    api_descriptions: list[ApiDescription]
    schema_registry: "SchemaRegistry"


class SchemaFilter(Protocol):
    def apply(self, schema: Schema, context: SchemaFilterContext) -> None: ...


class OperationFilter(Protocol):
    def apply(self, operation: Operation, context: OperationFilterContext) -> None: ...


class DocumentFilter(Protocol):
    def apply(self, document: Document, context: DocumentFilterContext) -> None: ...

"""Settings for the schema registry and the document generator."""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from swagger_gen.generator.schema_ids import default_schema_id
from swagger_gen.model.openapi import Info, Schema, SecurityScheme
from swagger_gen.model.routes import ApiDescription


def default_doc_inclusion_predicate(document_name: str, api_description: ApiDescription) -> bool:
    """Routes without a group belong to every document."""
    return api_description.group_name is None or api_description.group_name == document_name


def default_tag_selector(api_description: ApiDescription) -> str | None:
    return api_description.controller_name


class SchemaRegistrySettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    custom_type_mappings: dict[Any, Callable[[], Schema]] = Field(default_factory=dict)
    describe_all_enums_as_strings: bool = False
    describe_string_enums_in_camel_case: bool = False
    use_referenced_definitions_for_enums: bool = False
    schema_id_selector: Callable[[Any], str] = default_schema_id
    ignore_obsolete_properties: bool = False
    schema_filters: list[Any] = Field(default_factory=list)


class SwaggerGeneratorSettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    swagger_docs: dict[str, Info] = Field(default_factory=dict)
    doc_inclusion_predicate: Callable[[str, ApiDescription], bool] = default_doc_inclusion_predicate
    ignore_obsolete_actions: bool = False
    sort_key_selector: Callable[[ApiDescription], Any] | None = None
    tag_selector: Callable[[ApiDescription], str | None] = default_tag_selector
    conflicting_actions_resolver: Callable[[list[ApiDescription]], ApiDescription] | None = None
    describe_all_parameters_in_camel_case: bool = False
    security_definitions: dict[str, SecurityScheme] = Field(default_factory=dict)
    security_requirements: list[dict[str, list[str]]] = Field(default_factory=list)
    schemes: list[str] = Field(default_factory=list)
    operation_filters: list[Any] = Field(default_factory=list)
    document_filters: list[Any] = Field(default_factory=list)

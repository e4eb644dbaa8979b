"""Fluent configuration entry point.

    options = SwaggerGenOptions()
    options.swagger_doc("v1", Info(title="My API", version="v1"))
    options.enable_annotations()
    generator = options.build_generator(routes)
"""

from typing import Any, Callable

from swagger_gen.annotations.docstrings import DocstringOperationFilter
from swagger_gen.annotations.filters import (
    SwaggerAnnotationsOperationFilter,
    SwaggerAnnotationsSchemaFilter,
    SwaggerResponseAnnotationFilter,
)
from swagger_gen.contracts import ContractResolver
from swagger_gen.generator.document import SwaggerGenerator
from swagger_gen.generator.schema_ids import full_schema_id
from swagger_gen.generator.schema_registry import SchemaRegistryFactory
from swagger_gen.generator.settings import SchemaRegistrySettings, SwaggerGeneratorSettings
from swagger_gen.model.openapi import Info, Schema, SecurityScheme


class SwaggerGenOptions:
    """Generator settings, schema registry settings and serializer flags in one place."""

    def __init__(
        self,
        generator_settings: SwaggerGeneratorSettings | None = None,
        schema_registry_settings: SchemaRegistrySettings | None = None,
        camel_case_properties: bool = False,
        string_enums: bool = False,
        camel_case_enum_text: bool = False,
    ):
        self.generator_settings = generator_settings or SwaggerGeneratorSettings()
        self.schema_registry_settings = schema_registry_settings or SchemaRegistrySettings()
        self.camel_case_properties = camel_case_properties
        self.string_enums = string_enums
        self.camel_case_enum_text = camel_case_enum_text

    # -- documents & security -------------------------------------------------

    def swagger_doc(self, name: str, info: Info) -> "SwaggerGenOptions":
        self.generator_settings.swagger_docs[name] = info
        return self

    def doc_inclusion_predicate(self, predicate: Callable) -> "SwaggerGenOptions":
        self.generator_settings.doc_inclusion_predicate = predicate
        return self

    def add_security_definition(self, name: str, scheme: SecurityScheme) -> "SwaggerGenOptions":
        self.generator_settings.security_definitions[name] = scheme
        return self

    def add_security_requirement(self, requirement: dict[str, list[str]]) -> "SwaggerGenOptions":
        self.generator_settings.security_requirements.append(requirement)
        return self

    def resolve_conflicting_actions(self, resolver: Callable) -> "SwaggerGenOptions":
        self.generator_settings.conflicting_actions_resolver = resolver
        return self

    # -- filters --------------------------------------------------------------

    def operation_filter(self, operation_filter: Any) -> "SwaggerGenOptions":
        self.generator_settings.operation_filters.append(operation_filter)
        return self

    def document_filter(self, document_filter: Any) -> "SwaggerGenOptions":
        self.generator_settings.document_filters.append(document_filter)
        return self

    def schema_filter(self, schema_filter: Any) -> "SwaggerGenOptions":
        self.schema_registry_settings.schema_filters.append(schema_filter)
        return self

    def enable_annotations(self) -> "SwaggerGenOptions":
        self.operation_filter(SwaggerAnnotationsOperationFilter())
        self.operation_filter(SwaggerResponseAnnotationFilter())
        self.schema_filter(SwaggerAnnotationsSchemaFilter())
        return self

    def include_docstrings(self) -> "SwaggerGenOptions":
        return self.operation_filter(DocstringOperationFilter())

    # -- schemas --------------------------------------------------------------

    def map_type(self, type_, schema_factory: Callable[[], Schema]) -> "SwaggerGenOptions":
        self.schema_registry_settings.custom_type_mappings[type_] = schema_factory
        return self

    def use_full_type_name_in_schema_ids(self) -> "SwaggerGenOptions":
        self.schema_registry_settings.schema_id_selector = full_schema_id
        return self

    # -- build ----------------------------------------------------------------

    def contract_resolver(self) -> ContractResolver:
        return ContractResolver(
            camel_case_properties=self.camel_case_properties,
            string_enums=self.string_enums,
            camel_case_enum_text=self.camel_case_enum_text,
        )

    def build_generator(self, api_descriptions_provider) -> SwaggerGenerator:
        factory = SchemaRegistryFactory(self.contract_resolver(), self.schema_registry_settings)
        return SwaggerGenerator(api_descriptions_provider, factory, self.generator_settings)

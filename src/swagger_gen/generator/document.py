"""Document assembler: groups route operations into one OpenAPI document."""

import logging
from typing import Iterable, Protocol

from swagger_gen.errors import (
    AmbiguousHttpMethodError,
    ConflictingActionsError,
    NotSupportedError,
    UnknownSwaggerDocument,
)
from swagger_gen.generator.filters import DocumentFilterContext
from swagger_gen.generator.operation import OperationBuilder
from swagger_gen.generator.schema_registry import SchemaRegistry, SchemaRegistryFactory
from swagger_gen.generator.settings import SwaggerGeneratorSettings
from swagger_gen.model.openapi import OPERATION_TYPES, Components, Document, PathItem, Server
from swagger_gen.model.routes import ApiDescription

logger = logging.getLogger(__name__)

DEFAULT_HOST = "example.org/"


class ApiDescriptionsProvider(Protocol):
    def api_descriptions(self) -> Iterable[ApiDescription]: ...


def create_servers(schemes: list[str] | None, host: str | None = None, base_path: str | None = None) -> list[Server]:
    return [Server(url=f"{scheme}://{host or DEFAULT_HOST}{base_path or ''}") for scheme in schemes or []]


def _group_by(items, key) -> dict:
    groups: dict = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


class SwaggerGenerator:
    """Produces a fresh ``Document`` per ``get_swagger`` call."""

    def __init__(
        self,
        api_descriptions_provider: ApiDescriptionsProvider,
        schema_registry_factory: SchemaRegistryFactory | None = None,
        settings: SwaggerGeneratorSettings | None = None,
    ):
        self._api_descriptions_provider = api_descriptions_provider
        self._schema_registry_factory = schema_registry_factory or SchemaRegistryFactory()
        self.settings = settings or SwaggerGeneratorSettings()
        self._operation_builder = OperationBuilder(self.settings)

    def document_names(self) -> list[str]:
        return list(self.settings.swagger_docs)

    def get_swagger(
        self,
        document_name: str,
        host: str | None = None,
        base_path: str | None = None,
        schemes: list[str] | None = None,
    ) -> Document:
        info = self.settings.swagger_docs.get(document_name)
        if info is None:
            raise UnknownSwaggerDocument(document_name)

        schema_registry = self._schema_registry_factory.create()

        api_descriptions = [
            api_description
            for api_description in self._api_descriptions_provider.api_descriptions()
            if self.settings.doc_inclusion_predicate(document_name, api_description)
            and not (self.settings.ignore_obsolete_actions and api_description.is_obsolete())
        ]
        if self.settings.sort_key_selector is not None:
            api_descriptions.sort(key=self.settings.sort_key_selector)

        logger.debug("Generating document %s from %d routes", document_name, len(api_descriptions))

        paths = {
            "/" + path: self._create_path_item(group, schema_registry)
            for path, group in _group_by(api_descriptions, ApiDescription.relative_path_sans_query_string).items()
        }

        document = Document(
            info=info.model_copy(deep=True),
            servers=create_servers(schemes or self.settings.schemes, host, base_path),
            paths=paths,
            security=list(self.settings.security_requirements) or None,
        )
        document.components = self._create_components(schema_registry)

        filter_context = DocumentFilterContext(api_descriptions, schema_registry)
        for document_filter in self.settings.document_filters:
            document_filter.apply(document, filter_context)

        # filters may register further definitions
        if document.components is None and schema_registry.definitions:
            document.components = self._create_components(schema_registry)

        logger.debug(
            "Generated document %s: %d paths, %d definitions",
            document_name, len(document.paths), len(schema_registry.definitions),
        )
        return document

    def _create_components(self, schema_registry: SchemaRegistry) -> Components | None:
        security_schemes = self.settings.security_definitions
        if not schema_registry.definitions and not security_schemes:
            return None

        components = Components(security_schemes=dict(security_schemes) or None)
        # the live table, so definitions added later stay in sync
        components.schemas = schema_registry.definitions
        return components

    def _create_path_item(self, api_descriptions: list[ApiDescription], schema_registry: SchemaRegistry) -> PathItem:
        path_item = PathItem()

        for http_method, group in _group_by(api_descriptions, lambda d: d.http_method).items():
            if http_method is None:
                raise AmbiguousHttpMethodError(group[0].display_name)

            if len(group) > 1 and self.settings.conflicting_actions_resolver is None:
                raise ConflictingActionsError(
                    http_method,
                    group[0].relative_path_sans_query_string(),
                    [api_description.display_name for api_description in group],
                )

            api_description = group[0]
            if len(group) > 1:
                api_description = self.settings.conflicting_actions_resolver(group)
                if not any(api_description is candidate for candidate in group):
                    raise NotSupportedError(
                        f'conflicting_actions_resolver must return one of the actions for HTTP method "{http_method}" '
                        f'& path "{group[0].relative_path_sans_query_string()}" - '
                        f"{','.join(d.display_name for d in group)}"
                    )

            if http_method.lower() not in OPERATION_TYPES:
                logger.warning("Skipping %s: unsupported HTTP method %s", api_description.name, http_method)
                continue

            path_item.set_operation(http_method, self._operation_builder.build(api_description, schema_registry))

        return path_item

"""Filters driven by annotations on handlers, controllers and model types."""

from typing import get_origin

from swagger_gen.annotations.markers import (
    Authorize,
    SwaggerOperation,
    SwaggerOperationFilter,
    SwaggerResponse,
    SwaggerSchemaFilter,
    annotations_of,
)
from swagger_gen.generator.document import create_servers
from swagger_gen.generator.filters import OperationFilterContext, SchemaFilterContext
from swagger_gen.generator.operation import response_description
from swagger_gen.model.openapi import MediaType, Operation, Response, Schema


class SwaggerAnnotationsOperationFilter:
    """Applies ``SwaggerOperation`` overrides and annotation-declared operation filters."""

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        self._apply_operation_annotation(operation, context)
        self._apply_operation_filter_annotations(operation, context)

    @staticmethod
    def _apply_operation_annotation(operation: Operation, context: OperationFilterContext) -> None:
        annotation = next(
            (a for a in context.api_description.action_annotations if isinstance(a, SwaggerOperation)),
            None,
        )
        if annotation is None:
            return

        if annotation.operation_id is not None:
            operation.operation_id = annotation.operation_id
        if annotation.tags is not None:
            operation.tags = list(annotation.tags)
        if annotation.schemes is not None:
            operation.servers = create_servers(annotation.schemes)
        if annotation.summary is not None:
            operation.summary = annotation.summary
        if annotation.description is not None:
            operation.description = annotation.description

    @staticmethod
    def _apply_operation_filter_annotations(operation: Operation, context: OperationFilterContext) -> None:
        for annotation in context.api_description.annotations(SwaggerOperationFilter):
            annotation.filter_type().apply(operation, context)


class SwaggerResponseAnnotationFilter:
    """Merges ``SwaggerResponse`` annotations into the responses map."""

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        for annotation in context.api_description.annotations(SwaggerResponse):
            self._apply_annotation(operation, context, annotation)

    @staticmethod
    def _apply_annotation(operation: Operation, context: OperationFilterContext, annotation: SwaggerResponse) -> None:
        key = str(annotation.status_code)
        response = operation.responses.get(key)
        if response is None:
            response = Response(description=response_description(key))

        if annotation.description is not None:
            response.description = annotation.description

        if annotation.type is not None and annotation.type is not type(None):
            schema = context.schema_registry.get_or_register(annotation.type)
            if response.content:
                for media_type in response.content.values():
                    media_type.schema_ = schema
            else:
                response.content = {
                    media_type: MediaType(schema_=schema)
                    for media_type in context.api_description.supported_response_media_types()
                }

        operation.responses[key] = response


class SwaggerAnnotationsSchemaFilter:
    """Runs the schema filters declared on a model type with ``SwaggerSchemaFilter``."""

    def apply(self, schema: Schema, context: SchemaFilterContext) -> None:
        target = get_origin(context.system_type) or context.system_type
        for annotation in annotations_of(target):
            if isinstance(annotation, SwaggerSchemaFilter):
                annotation.filter_type().apply(schema, context)


class SecurityRequirementsOperationFilter:
    """``Authorize`` policies become the scopes of one security requirement."""

    def __init__(self, scheme_name: str = "oauth2"):
        self.scheme_name = scheme_name

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        scopes = []
        for annotation in context.api_description.annotations(Authorize):
            if annotation.policy is not None and annotation.policy not in scopes:
                scopes.append(annotation.policy)

        if not scopes:
            return

        operation.responses.setdefault("401", Response(description="Unauthorized"))
        operation.responses.setdefault("403", Response(description="Forbidden"))
        operation.security = [{self.scheme_name: scopes}]

"""Operation builder: one route + HTTP method -> one OpenAPI operation."""

import re

from swagger_gen.annotations.markers import SwaggerRequestBody
from swagger_gen.generator.filters import OperationFilterContext
from swagger_gen.generator.schema_registry import SchemaRegistry
from swagger_gen.generator.settings import SwaggerGeneratorSettings
from swagger_gen.model.openapi import MediaType, Operation, Parameter, RequestBody, Response, Schema
from swagger_gen.model.routes import ApiDescription, ApiParameterDescription, ApiResponseType, BindingSource
from swagger_gen.naming import to_camel_case

RESPONSE_DESCRIPTIONS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"1(\d{2}|XX)"), "Information"),
    (re.compile(r"2(\d{2}|XX)"), "Success"),
    (re.compile(r"3(\d{2}|XX)"), "Redirect"),
    (re.compile(r"400"), "Bad Request"),
    (re.compile(r"401"), "Unauthorized"),
    (re.compile(r"403"), "Forbidden"),
    (re.compile(r"404"), "Not Found"),
    (re.compile(r"405"), "Method Not Allowed"),
    (re.compile(r"406"), "Not Acceptable"),
    (re.compile(r"408"), "Request Timeout"),
    (re.compile(r"409"), "Conflict"),
    (re.compile(r"4(\d{2}|XX)"), "Client Error"),
    (re.compile(r"5(\d{2}|XX)"), "Server Error"),
]

_LOCATIONS = {
    BindingSource.FORM: "formData",
    BindingSource.BODY: "body",
    BindingSource.HEADER: "header",
    BindingSource.PATH: "path",
    BindingSource.QUERY: "query",
    BindingSource.COOKIE: "cookie",
}


def response_description(status_code: int | str) -> str:
    """Describe a status code (``"404"`` -> ``Not Found``, ``"4XX"`` -> ``Client Error``)."""
    code = str(status_code).upper()
    for pattern, description in RESPONSE_DESCRIPTIONS:
        if pattern.fullmatch(code):
            return description
    return ""


def parameter_location(parameter: ApiParameterDescription) -> str:
    # Unclassified parameters come from flattened complex models, whatever
    # the HTTP method, so query is the only sensible default.
    return _LOCATIONS.get(parameter.source, "query")


class OperationBuilder:
    """Builds operations from route metadata using a shared schema registry."""

    def __init__(self, settings: SwaggerGeneratorSettings | None = None):
        self.settings = settings or SwaggerGeneratorSettings()

    def build(self, api_description: ApiDescription, schema_registry: SchemaRegistry) -> Operation:
        bound_parameters = [
            p for p in api_description.parameters
            if (p.source is None or p.source.is_from_request)
            and p.binding_allowed
            and not p.is_cancellation_token
        ]

        parameters = []
        for param_description in bound_parameters:
            parameter = self._create_parameter(param_description, schema_registry)
            if parameter is not None:
                parameters.append(parameter)

        response_types = api_description.supported_response_types or [ApiResponseType(status_code=200)]
        responses = {
            str(response_type.status_code): self._create_response(api_description, response_type, schema_registry)
            for response_type in response_types
        }

        tag = self.settings.tag_selector(api_description)

        operation = Operation(
            tags=[tag] if tag else None,
            operation_id=api_description.friendly_id(),
            parameters=parameters or None,  # absent rather than empty
            request_body=self._create_request_body(api_description, bound_parameters, schema_registry),
            responses=responses,
            deprecated=api_description.is_obsolete(),
        )

        filter_context = OperationFilterContext(api_description, schema_registry)
        for operation_filter in self.settings.operation_filters:
            operation_filter.apply(operation, filter_context)

        return operation

    def _parameter_name(self, name: str) -> str:
        return to_camel_case(name) if self.settings.describe_all_parameters_in_camel_case else name

    def _create_parameter(
        self,
        param_description: ApiParameterDescription,
        schema_registry: SchemaRegistry,
    ) -> Parameter | None:
        location = parameter_location(param_description)
        if location in ("body", "formData"):
            return None

        if param_description.type is None:
            schema = Schema(type="string")
        else:
            schema = schema_registry.get_or_register(param_description.type)

        parameter = Parameter(
            name=self._parameter_name(param_description.name),
            in_=location,
            required=location == "path" or param_description.is_required,
            schema_=schema,
        )

        # enums registered as definitions come back as references
        full_schema = schema
        if schema.ref is not None:
            full_schema = schema_registry.definitions.get(schema.reference_id) or schema
        if full_schema.type == "array":
            parameter.style = "deepObject"

        return parameter

    def _create_request_body(
        self,
        api_description: ApiDescription,
        bound_parameters: list[ApiParameterDescription],
        schema_registry: SchemaRegistry,
    ) -> RequestBody | None:
        media_types = api_description.supported_request_media_types
        if not media_types:
            return None

        annotations = api_description.annotations(SwaggerRequestBody)
        annotation = annotations[-1] if annotations else None
        body_param = next((p for p in bound_parameters if p.source == BindingSource.BODY), None)
        form_params = [p for p in bound_parameters if p.source == BindingSource.FORM]

        schema = None
        if annotation is not None and annotation.type is not None:
            schema = schema_registry.get_or_register(annotation.type)
        elif body_param is not None and body_param.type is not None:
            schema = schema_registry.get_or_register(body_param.type)
        elif form_params:
            schema = self._create_form_schema(form_params, schema_registry)

        required = None
        if annotation is not None and annotation.required is not None:
            required = annotation.required
        elif body_param is not None:
            required = body_param.is_required

        return RequestBody(
            description=annotation.description if annotation is not None else None,
            content={media_type: MediaType(schema_=schema) for media_type in media_types},
            required=required,
        )

    def _create_form_schema(
        self,
        form_params: list[ApiParameterDescription],
        schema_registry: SchemaRegistry,
    ) -> Schema:
        properties = {}
        required = []
        for param in form_params:
            name = self._parameter_name(param.name)
            properties[name] = (
                schema_registry.get_or_register(param.type) if param.type is not None else Schema(type="string")
            )
            if param.is_required:
                required.append(name)
        return Schema(type="object", properties=properties, required=required or None)

    def _create_response(
        self,
        api_description: ApiDescription,
        response_type: ApiResponseType,
        schema_registry: SchemaRegistry,
    ) -> Response:
        response = Response(description=response_description(response_type.status_code))
        if not response_type.has_content:
            return response

        schema = schema_registry.get_or_register(response_type.type)
        media_types = response_type.media_types or api_description.supported_response_media_types()
        response.content = {media_type: MediaType(schema_=schema) for media_type in media_types}
        return response

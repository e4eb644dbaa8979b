"""OpenAPI 3 object model.

Every generated document is built from these pydantic models. Vendor
extensions live in ``extensions`` and are merged into the serialized
output next to the regular fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

REFERENCE_PREFIX = "#/components/schemas/"

OPERATION_TYPES = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class OpenApiModel(BaseModel):
    """Base for all document elements; carries the vendor extension bag."""

    model_config = ConfigDict(populate_by_name=True)

    extensions: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @model_serializer(mode="wrap")
    def _merge_extensions(self, handler):
        data = handler(self)
        if self.extensions:
            data.update(self.extensions)
        return data


class Schema(OpenApiModel):
    """A JSON-Schema fragment. A reference node carries only ``ref``."""

    ref: str | None = Field(None, alias="$ref")
    type: str | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    properties: dict[str, "Schema"] | None = None
    required: list[str] | None = None
    items: "Schema | None" = None
    additional_properties: "Schema | bool | None" = Field(None, alias="additionalProperties")
    enum: list[Any] | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: bool | None = Field(None, alias="exclusiveMinimum")
    exclusive_maximum: bool | None = Field(None, alias="exclusiveMaximum")
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")
    min_items: int | None = Field(None, alias="minItems")
    max_items: int | None = Field(None, alias="maxItems")
    pattern: str | None = None
    default: Any = None
    nullable: bool | None = None
    deprecated: bool | None = None

    @classmethod
    def reference(cls, schema_id: str) -> "Schema":
        return cls(ref=REFERENCE_PREFIX + schema_id)

    @property
    def reference_id(self) -> str | None:
        if self.ref is None:
            return None
        return self.ref[len(REFERENCE_PREFIX):] if self.ref.startswith(REFERENCE_PREFIX) else self.ref


class MediaType(OpenApiModel):
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None


class Parameter(OpenApiModel):
    """A non-body operation parameter (path, query, header or cookie)."""

    name: str
    in_: str = Field(alias="in")
    description: str | None = None
    required: bool | None = None
    deprecated: bool | None = None
    style: str | None = None
    explode: bool | None = None
    schema_: Schema | None = Field(None, alias="schema")


class RequestBody(OpenApiModel):
    description: str | None = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    required: bool | None = None


class Response(OpenApiModel):
    description: str = ""
    content: dict[str, MediaType] = Field(default_factory=dict)


class Server(OpenApiModel):
    url: str
    description: str | None = None


class Tag(OpenApiModel):
    name: str
    description: str | None = None


class Operation(OpenApiModel):
    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = Field(None, alias="operationId")
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[str, Response] = Field(default_factory=dict)
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None
    servers: list[Server] | None = None


class PathItem(OpenApiModel):
    """Operations for one path, at most one per HTTP method."""

    summary: str | None = None
    description: str | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """Return the populated operations keyed by upper-case HTTP method."""
        return {
            method.upper(): getattr(self, method)
            for method in OPERATION_TYPES
            if getattr(self, method) is not None
        }

    def set_operation(self, http_method: str, operation: Operation) -> None:
        method = http_method.lower()
        if method not in OPERATION_TYPES:
            raise ValueError(f"Unsupported HTTP method: {http_method}")
        setattr(self, method, operation)


class OAuthFlow(OpenApiModel):
    authorization_url: str | None = Field(None, alias="authorizationUrl")
    token_url: str | None = Field(None, alias="tokenUrl")
    refresh_url: str | None = Field(None, alias="refreshUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(OpenApiModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = Field(None, alias="clientCredentials")
    authorization_code: OAuthFlow | None = Field(None, alias="authorizationCode")


class SecurityScheme(OpenApiModel):
    type: str
    description: str | None = None
    name: str | None = None
    in_: str | None = Field(None, alias="in")
    scheme: str | None = None
    bearer_format: str | None = Field(None, alias="bearerFormat")
    flows: OAuthFlows | None = None
    open_id_connect_url: str | None = Field(None, alias="openIdConnectUrl")


class Contact(OpenApiModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(OpenApiModel):
    name: str
    url: str | None = None


class Info(OpenApiModel):
    title: str
    version: str
    description: str | None = None
    terms_of_service: str | None = Field(None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None


class Components(OpenApiModel):
    schemas: dict[str, Schema | None] | None = None
    security_schemes: dict[str, SecurityScheme] | None = Field(None, alias="securitySchemes")


class Document(OpenApiModel):
    openapi: str = "3.0.1"
    info: Info
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components | None = None
    security: list[dict[str, list[str]]] | None = None
    tags: list[Tag] | None = None

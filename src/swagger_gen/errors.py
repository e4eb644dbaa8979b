"""Exceptions raised while generating an OpenAPI document."""


class SwaggerGenError(Exception):
    """Base class for all swagger-gen errors."""


class UnknownSwaggerDocument(SwaggerGenError, KeyError):
    """Requested document name is not configured."""

    def __init__(self, document_name: str):
        self.document_name = document_name
        super().__init__(f'Unknown Swagger document - "{document_name}"')

    def __str__(self) -> str:
        return self.args[0]


class NotSupportedError(SwaggerGenError):
    """Route metadata cannot be represented in the document."""


class AmbiguousHttpMethodError(NotSupportedError):
    def __init__(self, display_name: str):
        self.display_name = display_name
        super().__init__(
            f"Ambiguous HTTP method for action - {display_name}. "
            "Actions require an explicit HTTP method binding"
        )


class ConflictingActionsError(NotSupportedError):
    def __init__(self, http_method: str, path: str, display_names: list[str]):
        self.http_method = http_method
        self.path = path
        self.display_names = display_names
        super().__init__(
            f'HTTP method "{http_method}" & path "{path}" overloaded by actions - '
            f"{','.join(display_names)}. "
            "Actions require unique method/path combination. "
            "Use conflicting_actions_resolver as a workaround"
        )


class SchemaIdConflictError(SwaggerGenError):
    """Two distinct types resolved to the same schema identifier."""

    def __init__(self, schema_id: str, existing_type, conflicting_type):
        self.schema_id = schema_id
        self.existing_type = existing_type
        self.conflicting_type = conflicting_type
        super().__init__(
            f'Conflicting schema ids: "{schema_id}" is claimed by both '
            f"{existing_type!r} and {conflicting_type!r}. "
            "See use_full_type_name_in_schema_ids for a potential workaround"
        )


class ConfigError(SwaggerGenError):
    """Configuration file is missing or invalid."""

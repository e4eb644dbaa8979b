"""YAML configuration file for the generator.

Example::

    docs:
      v1:
        title: Cart API
        version: v1
    schemes: [https]
    host: api.example.com
    describe_all_enums_as_strings: true
    security_definitions:
      oauth2:
        type: oauth2
        flows:
          implicit:
            authorizationUrl: https://auth.example.com/authorize
            scopes: {read: Read access}
    security_requirements:
      - oauth2: [read]
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from swagger_gen.errors import ConfigError
from swagger_gen.model.openapi import Info, SecurityScheme
from swagger_gen.options import SwaggerGenOptions


class SwaggerGenConfig(BaseModel):
    """Settings that can be expressed without code."""

    docs: dict[str, Info] = Field(default_factory=dict)
    schemes: list[str] = Field(default_factory=list)
    host: str | None = None
    base_path: str | None = None

    ignore_obsolete_actions: bool = False
    ignore_obsolete_properties: bool = False
    describe_all_parameters_in_camel_case: bool = False
    describe_all_enums_as_strings: bool = False
    describe_string_enums_in_camel_case: bool = False
    use_referenced_definitions_for_enums: bool = False
    use_full_type_name_in_schema_ids: bool = False
    camel_case_properties: bool = False

    enable_annotations: bool = False
    include_docstrings: bool = False

    security_definitions: dict[str, SecurityScheme] = Field(default_factory=dict)
    security_requirements: list[dict[str, list[str]]] = Field(default_factory=list)

    def to_options(self, options: SwaggerGenOptions | None = None) -> SwaggerGenOptions:
        """Apply this configuration on top of ``options`` (or fresh defaults)."""
        options = options or SwaggerGenOptions()
        options.camel_case_properties = options.camel_case_properties or self.camel_case_properties

        for name, info in self.docs.items():
            options.swagger_doc(name, info)
        for name, scheme in self.security_definitions.items():
            options.add_security_definition(name, scheme)
        for requirement in self.security_requirements:
            options.add_security_requirement(requirement)

        generator_settings = options.generator_settings
        generator_settings.schemes = self.schemes or generator_settings.schemes
        generator_settings.ignore_obsolete_actions |= self.ignore_obsolete_actions
        generator_settings.describe_all_parameters_in_camel_case |= self.describe_all_parameters_in_camel_case

        registry_settings = options.schema_registry_settings
        registry_settings.ignore_obsolete_properties |= self.ignore_obsolete_properties
        registry_settings.describe_all_enums_as_strings |= self.describe_all_enums_as_strings
        registry_settings.describe_string_enums_in_camel_case |= self.describe_string_enums_in_camel_case
        registry_settings.use_referenced_definitions_for_enums |= self.use_referenced_definitions_for_enums

        if self.use_full_type_name_in_schema_ids:
            options.use_full_type_name_in_schema_ids()
        if self.enable_annotations:
            options.enable_annotations()
        if self.include_docstrings:
            options.include_docstrings()
        return options


def load_config(path: Path) -> SwaggerGenConfig:
    """Read and validate a YAML configuration file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    try:
        return SwaggerGenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}:\n{e}") from e

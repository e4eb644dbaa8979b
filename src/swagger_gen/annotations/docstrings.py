"""Operation documentation taken from handler docstrings.

Google-style sections are recognised::

    Get a cart.

    Longer description of the route.

    Args:
        cart_id: Identifier of the cart.

    Responses:
        200: The cart.
        404: No such cart.
"""

import inspect
import re
from dataclasses import dataclass, field

from swagger_gen.generator.filters import OperationFilterContext
from swagger_gen.model.openapi import Operation, Response
from swagger_gen.model.routes import BindingSource
from swagger_gen.naming import to_camel_case

_SECTION = re.compile(r"^(args|arguments|params|parameters|responses|returns|raises):\s*$", re.IGNORECASE)
_ENTRY = re.compile(r"^(\w+)\s*(?:\([^)]*\))?\s*:\s*(.*)$")


@dataclass
class ParsedDocstring:
    summary: str = ""
    description: str = ""
    params: dict[str, str] = field(default_factory=dict)
    responses: dict[str, str] = field(default_factory=dict)


def parse_docstring(docstring: str | None) -> ParsedDocstring:
    result = ParsedDocstring()
    if not docstring:
        return result

    lines = inspect.cleandoc(docstring).splitlines()
    section = None
    current: dict[str, str] | None = None
    current_key = None
    free_text: list[str] = []

    for line in lines:
        stripped = line.strip()
        header = _SECTION.match(stripped)
        if header:
            name = header.group(1).lower()
            if name in ("args", "arguments", "params", "parameters"):
                section, current = "params", result.params
            elif name == "responses":
                section, current = "responses", result.responses
            else:
                section, current = "ignored", None
            current_key = None
            continue

        if section is None:
            free_text.append(stripped)
            continue
        if current is None or not stripped:
            continue

        entry = _ENTRY.match(stripped)
        if entry and line[:1].isspace():
            current_key = entry.group(1)
            current[current_key] = entry.group(2).strip()
        elif current_key is not None:
            current[current_key] = f"{current[current_key]} {stripped}".strip()

    paragraphs = "\n".join(free_text).strip().split("\n\n", 1)
    result.summary = " ".join(paragraphs[0].split())
    if len(paragraphs) > 1:
        result.description = paragraphs[1].strip()
    return result


class DocstringOperationFilter:
    """Fills summary, description, parameter and response text from the handler docstring."""

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        action = context.api_description.action
        if action is None:
            return

        doc = parse_docstring(inspect.getdoc(action))
        if doc.summary:
            operation.summary = doc.summary
        if doc.description:
            operation.description = doc.description

        self._apply_params(operation, context, doc.params)

        for status_code, description in doc.responses.items():
            response = operation.responses.get(status_code)
            if response is None:
                operation.responses[status_code] = Response(description=description)
            else:
                response.description = description

    @staticmethod
    def _apply_params(operation: Operation, context: OperationFilterContext, params: dict[str, str]) -> None:
        if not params:
            return

        for parameter in operation.parameters or []:
            description = params.get(parameter.name)
            if description is None:
                # parameter names may have been camel-cased
                description = next(
                    (text for name, text in params.items() if to_camel_case(name) == parameter.name),
                    None,
                )
            if description is not None:
                parameter.description = description

        if operation.request_body is None or operation.request_body.description:
            return
        for param_description in context.api_description.parameters:
            if param_description.source == BindingSource.BODY and param_description.name in params:
                operation.request_body.description = params[param_description.name]

"""Per-route and per-type annotations.

Decorators attach these markers to handlers, controllers and model classes
under ``__swagger_annotations__``. Route discovery copies them onto
``ApiDescription.action_annotations`` / ``controller_annotations``; the
annotation filters read them back.
"""

from dataclasses import dataclass
from typing import Any

ANNOTATIONS_ATTR = "__swagger_annotations__"


@dataclass(frozen=True)
class Obsolete:
    """Marks an action (or controller) as deprecated."""


@dataclass
class SwaggerOperation:
    operation_id: str | None = None
    tags: list[str] | None = None
    schemes: list[str] | None = None
    summary: str | None = None
    description: str | None = None


@dataclass
class SwaggerOperationFilter:
    filter_type: type


@dataclass
class SwaggerResponse:
    status_code: int | str
    type: Any = None
    description: str | None = None


@dataclass
class SwaggerRequestBody:
    type: Any
    description: str | None = None
    required: bool | None = None


@dataclass
class SwaggerSchemaFilter:
    filter_type: type


@dataclass
class Authorize:
    policy: str | None = None


def annotate(*annotations):
    """Attach ``annotations`` to the decorated function or class.

    Stacked decorators keep their source order, top first.
    """

    def decorator(target):
        existing = list(vars(target).get(ANNOTATIONS_ATTR, ()))
        if not existing and isinstance(target, type):
            # inherited controller annotations
            existing = list(getattr(target, ANNOTATIONS_ATTR, ()))
        setattr(target, ANNOTATIONS_ATTR, list(annotations) + existing)
        return target

    return decorator


def annotations_of(target) -> list[Any]:
    if target is None:
        return []
    return list(getattr(target, ANNOTATIONS_ATTR, ()))


def swagger_operation(operation_id=None, tags=None, schemes=None, summary=None, description=None):
    return annotate(SwaggerOperation(operation_id, tags, schemes, summary, description))


def swagger_response(status_code, type=None, description=None):
    return annotate(SwaggerResponse(status_code, type, description))


def swagger_request_body(type, description=None, required=None):
    return annotate(SwaggerRequestBody(type, description, required))


def swagger_operation_filter(filter_type):
    return annotate(SwaggerOperationFilter(filter_type))


def swagger_schema_filter(filter_type):
    return annotate(SwaggerSchemaFilter(filter_type))


def authorize(policy=None):
    return annotate(Authorize(policy))


def obsolete(target):
    return annotate(Obsolete())(target)

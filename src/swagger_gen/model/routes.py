"""Route metadata consumed by the generator.

The host framework describes each route with an ``ApiDescription``. The
generator only reads these models; it never executes the handlers.
"""

import inspect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, get_type_hints

from pydantic import BaseModel, ConfigDict, Field

from swagger_gen.annotations.markers import Obsolete, annotations_of
from swagger_gen.contracts import annotated_metadata, unwrap_type
from swagger_gen.naming import to_title_case

_NON_WORD = re.compile(r"[^0-9A-Za-z]+")
_PATH_PARAMETER = re.compile(r"\{\*?(\w+)")

DEFAULT_REQUEST_MEDIA_TYPES = ["application/json", "text/json", "application/*+json"]
DEFAULT_RESPONSE_MEDIA_TYPES = ["application/json", "text/json"]


class BindingSource(str, Enum):
    """Where a parameter value is bound from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"
    FORM = "form"
    SERVICES = "services"
    SPECIAL = "special"

    @property
    def is_from_request(self) -> bool:
        return self not in (BindingSource.SERVICES, BindingSource.SPECIAL)


class ApiParameterDescription(BaseModel):
    """A single handler parameter as seen by the model binder."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    source: BindingSource | None = None  # None = unclassified
    type: Any = None
    is_required: bool = False
    binding_allowed: bool = True
    is_cancellation_token: bool = False


class ApiResponseType(BaseModel):
    """One possible response of a route."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status_code: int | str = 200
    type: Any = None  # None / NoneType = no content
    media_types: list[str] = Field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return self.type is not None and self.type is not type(None)


class ApiDescription(BaseModel):
    """HTTP method, path template, parameters and responses of one route."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_method: str | None
    relative_path: str
    group_name: str | None = None
    controller_name: str | None = None
    display_name: str = ""
    action: Any = None
    parameters: list[ApiParameterDescription] = Field(default_factory=list)
    supported_request_media_types: list[str] = Field(default_factory=list)
    supported_response_types: list[ApiResponseType] = Field(default_factory=list)
    action_annotations: list[Any] = Field(default_factory=list)
    controller_annotations: list[Any] = Field(default_factory=list)
    obsolete: bool = False

    @property
    def name(self) -> str:
        return self.display_name or f"{self.http_method} {self.relative_path}"

    def relative_path_sans_query_string(self) -> str:
        return self.relative_path.split("?", 1)[0].strip("/")

    def annotations(self, annotation_type: type | None = None) -> list[Any]:
        """Controller annotations followed by action annotations, deduplicated."""
        result = []
        for annotation in self.controller_annotations + self.action_annotations:
            if annotation_type is not None and not isinstance(annotation, annotation_type):
                continue
            if annotation not in result:
                result.append(annotation)
        return result

    def is_obsolete(self) -> bool:
        if self.obsolete or self.annotations(Obsolete):
            return True
        return getattr(self.action, "__deprecated__", None) is not None

    def supported_response_media_types(self) -> list[str]:
        media_types: list[str] = []
        for response_type in self.supported_response_types:
            for media_type in response_type.media_types:
                if media_type not in media_types:
                    media_types.append(media_type)
        return media_types

    def friendly_id(self) -> str:
        """Operation id built from the path template and HTTP method.

        ``GET carts/{cartId}/items/{id}`` -> ``CartsByCartIdItemsByIdGet``.
        """
        segments = self.relative_path_sans_query_string().split("/")
        segments.append((self.http_method or "").lower())

        parts = []
        for segment in segments:
            if not segment:
                continue
            is_parameter = segment.startswith("{")
            token = segment.strip("{}")
            if is_parameter:
                # {id:int} / {id?}
                token = token.split(":", 1)[0].rstrip("?").lstrip("*")
            words = "".join(to_title_case(w) for w in _NON_WORD.split(token) if w)
            parts.append(("By" if is_parameter else "") + words)
        return "".join(parts)


# -- handler signature binding ------------------------------------------------


@dataclass(frozen=True)
class BindingMarker:
    """``Annotated`` metadata selecting where a handler argument is bound from."""

    source: ClassVar[BindingSource]
    name: str | None = None


class FromPath(BindingMarker):
    source = BindingSource.PATH


class FromQuery(BindingMarker):
    source = BindingSource.QUERY


class FromHeader(BindingMarker):
    source = BindingSource.HEADER


class FromCookie(BindingMarker):
    source = BindingSource.COOKIE


class FromBody(BindingMarker):
    source = BindingSource.BODY


class FromForm(BindingMarker):
    source = BindingSource.FORM


class FromServices(BindingMarker):
    source = BindingSource.SERVICES


@dataclass(frozen=True)
class BindRequired:
    """The argument must be supplied by the request."""


def _controller_name(controller) -> str | None:
    if controller is None:
        return None
    name = controller.__name__
    return name[: -len("Controller")] if name.endswith("Controller") and name != "Controller" else name


def describe_parameters(action, relative_path: str) -> list[ApiParameterDescription]:
    """Describe the bindable arguments of ``action`` from its signature."""
    try:
        hints = get_type_hints(action, include_extras=True)
    except (NameError, TypeError):
        hints = {}

    path_names = set(_PATH_PARAMETER.findall(relative_path))
    descriptions = []
    for name, parameter in inspect.signature(action).parameters.items():
        if name in ("self", "cls") or parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue

        hint = hints.get(name)
        param_type = unwrap_type(hint) if hint is not None else None
        metadata = annotated_metadata(hint)
        marker = next((m for m in metadata if isinstance(m, BindingMarker)), None)

        if marker is not None:
            source = marker.source
        elif name in path_names:
            source = BindingSource.PATH
        else:
            source = None

        is_required = any(isinstance(m, BindRequired) for m in metadata)
        if source == BindingSource.BODY and parameter.default is inspect.Parameter.empty:
            is_required = True

        descriptions.append(ApiParameterDescription(
            name=(marker.name if marker is not None and marker.name else name),
            source=source,
            type=param_type,
            is_required=is_required,
        ))
    return descriptions


class ApiDescriptionCollection:
    """In-memory route table; the simplest ``api_descriptions()`` provider."""

    def __init__(self, api_descriptions: list[ApiDescription] | None = None):
        self._items: list[ApiDescription] = list(api_descriptions or [])

    def api_descriptions(self) -> list[ApiDescription]:
        return list(self._items)

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def append(self, api_description: ApiDescription) -> ApiDescription:
        self._items.append(api_description)
        return api_description

    def add(
        self,
        http_method: str | None,
        relative_path: str,
        action,
        controller=None,
        group_name: str | None = None,
        display_name: str | None = None,
        response_types: list[ApiResponseType] | None = None,
        request_media_types: list[str] | None = None,
        response_media_types: list[str] | None = None,
    ) -> ApiDescription:
        """Describe ``action`` by inspecting its signature and register it."""
        parameters = describe_parameters(action, relative_path)

        if response_media_types is None:
            response_media_types = list(DEFAULT_RESPONSE_MEDIA_TYPES)
        if response_types is None:
            response_types = []
            signature = inspect.signature(action)
            if signature.return_annotation is not inspect.Signature.empty:
                try:
                    return_type = get_type_hints(action, include_extras=True).get("return")
                except (NameError, TypeError):
                    return_type = signature.return_annotation
                response_types.append(ApiResponseType(
                    status_code=200,
                    type=return_type,
                    media_types=response_media_types if return_type not in (None, type(None)) else [],
                ))

        if request_media_types is None:
            has_body = any(p.source in (BindingSource.BODY, BindingSource.FORM) for p in parameters)
            request_media_types = list(DEFAULT_REQUEST_MEDIA_TYPES) if has_body else []

        if display_name is None:
            display_name = f"{action.__module__}.{action.__qualname__}"

        return self.append(ApiDescription(
            http_method=http_method.upper() if http_method else None,
            relative_path=relative_path,
            group_name=group_name,
            controller_name=_controller_name(controller),
            display_name=display_name,
            action=action,
            parameters=parameters,
            supported_request_media_types=request_media_types,
            supported_response_types=response_types,
            action_annotations=annotations_of(action),
            controller_annotations=annotations_of(controller),
        ))

    def route(self, http_method: str | None, relative_path: str, **kwargs):
        """Decorator form of ``add``."""

        def decorator(action):
            self.add(http_method, relative_path, action, **kwargs)
            return action

        return decorator

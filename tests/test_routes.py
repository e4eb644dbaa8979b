import warnings
from typing import Annotated

import pytest

from api_fixtures import Cart, CartsController, Item, build_routes
from swagger_gen.annotations.markers import Authorize, Obsolete
from swagger_gen.model.routes import (
    DEFAULT_REQUEST_MEDIA_TYPES,
    DEFAULT_RESPONSE_MEDIA_TYPES,
    ApiDescription,
    ApiDescriptionCollection,
    ApiResponseType,
    BindingSource,
    FromCookie,
    FromForm,
    FromServices,
    describe_parameters,
)


def _by_path(routes: ApiDescriptionCollection) -> dict[str, ApiDescription]:
    return {r.relative_path: r for r in routes.api_descriptions()}


class TestApiDescription:
    def test_relative_path_sans_query_string(self):
        route = ApiDescription(http_method="GET", relative_path="/carts/{id}/?expand=items")

        assert route.relative_path_sans_query_string() == "carts/{id}"

    @pytest.mark.parametrize("path, method, expected", [
        ("carts/{cartId}/items/{id}", "GET", "CartsByCartIdItemsByIdGet"),
        ("carts/{cart_id}", "POST", "CartsByCartIdPost"),
        ("files/{*path}", "GET", "FilesByPathGet"),
        ("items/{id?}", "PUT", "ItemsByIdPut"),
        ("shopping-carts", "GET", "ShoppingCartsGet"),
        ("", "GET", "Get"),
    ])
    def test_friendly_id(self, path, method, expected):
        assert ApiDescription(http_method=method, relative_path=path).friendly_id() == expected

    def test_annotations_are_deduplicated(self):
        route = ApiDescription(
            http_method="GET", relative_path="a",
            controller_annotations=[Authorize("read")],
            action_annotations=[Authorize("read"), Authorize("write"), Obsolete()],
        )

        assert route.annotations(Authorize) == [Authorize("read"), Authorize("write")]
        assert len(route.annotations()) == 3

    def test_obsolete_sources(self):
        def handler():
            pass

        handler.__deprecated__ = "use something else"

        assert ApiDescription(http_method="GET", relative_path="a", obsolete=True).is_obsolete()
        assert ApiDescription(http_method="GET", relative_path="a", controller_annotations=[Obsolete()]).is_obsolete()
        assert ApiDescription(http_method="GET", relative_path="a", action=handler).is_obsolete()
        assert not ApiDescription(http_method="GET", relative_path="a").is_obsolete()

    def test_supported_response_media_types(self):
        route = ApiDescription(http_method="GET", relative_path="a", supported_response_types=[
            ApiResponseType(media_types=["application/json", "text/json"]),
            ApiResponseType(status_code=400, media_types=["application/problem+json", "application/json"]),
        ])

        assert route.supported_response_media_types() == ["application/json", "text/json", "application/problem+json"]


class TestDescribeParameters:
    def test_sources_from_markers_and_path(self):
        def handler(
            cart_id: int,
            page: int = 1,
            session: Annotated[str, FromCookie()] = "",
            upload: Annotated[bytes, FromForm()] = b"",
            clock: Annotated[object, FromServices()] = None,
            *args,
            **kwargs,
        ):
            pass

        parameters = describe_parameters(handler, "carts/{cart_id}")

        assert [(p.name, p.source) for p in parameters] == [
            ("cart_id", BindingSource.PATH),
            ("page", None),
            ("session", BindingSource.COOKIE),
            ("upload", BindingSource.FORM),
            ("clock", BindingSource.SERVICES),
        ]
        assert parameters[0].type is int
        assert parameters[2].type is str

    def test_unannotated_parameters_have_no_type(self):
        def handler(q):
            pass

        assert describe_parameters(handler, "a")[0].type is None


class TestApiDescriptionCollection:
    def test_add_inspects_handler(self):
        routes = _by_path(build_routes())

        get_cart = routes["carts/{cart_id}"]
        assert get_cart.http_method == "GET"
        assert get_cart.controller_name == "Carts"
        assert get_cart.display_name.endswith("CartsController.get_cart")
        assert [(p.name, p.source) for p in get_cart.parameters] == [
            ("cart_id", BindingSource.PATH), ("expand", BindingSource.QUERY),
        ]
        assert get_cart.parameters[1].type == list[str]
        assert get_cart.supported_request_media_types == []
        [response] = get_cart.supported_response_types
        assert (response.status_code, response.type) == (200, Cart)
        assert response.media_types == DEFAULT_RESPONSE_MEDIA_TYPES
        assert get_cart.controller_annotations == [Authorize("carts.read")]

    def test_body_and_header_binding(self):
        add_item = _by_path(build_routes())["carts/{cart_id}/items"]

        parameters = {p.name: p for p in add_item.parameters}
        assert parameters["item"].source == BindingSource.BODY
        assert parameters["item"].type is Item
        assert parameters["item"].is_required is True
        assert parameters["X-Request-Id"].source == BindingSource.HEADER
        assert parameters["X-Request-Id"].is_required is True
        assert add_item.supported_request_media_types == DEFAULT_REQUEST_MEDIA_TYPES
        [response] = add_item.supported_response_types
        assert not response.has_content
        assert response.media_types == []

    def test_route_decorator(self):
        routes = ApiDescriptionCollection()

        @routes.route("delete", "items/{id}", group_name="v2")
        def delete_item(id: int):
            pass

        [route] = routes.api_descriptions()
        assert route.http_method == "DELETE"
        assert route.group_name == "v2"
        assert route.controller_name is None
        assert route.supported_response_types == []
        assert len(routes) == 1

    def test_missing_method_is_kept(self):
        routes = ApiDescriptionCollection()
        routes.add(None, "a", CartsController.legacy_list)

        assert routes.api_descriptions()[0].http_method is None

    def test_api_descriptions_returns_a_copy(self):
        routes = build_routes()
        routes.api_descriptions().clear()

        assert len(routes) == 3


class TestDeprecatedHandlers:
    def test_warnings_deprecated_decorator(self):
        deprecated = getattr(warnings, "deprecated", None)
        if deprecated is None:
            pytest.skip("warnings.deprecated requires Python 3.13")

        @deprecated("use v2")
        def handler():
            pass

        assert ApiDescription(http_method="GET", relative_path="a", action=handler).is_obsolete()

"""
Unit tests for URL router.
"""

from movieserver.http.errors import HTTPError
from movieserver.http.router import Router
from movieserver.http.request import HTTPRequest
from movieserver.http.response import HTTPResponse, ResponseBuilder
from movieserver.http.status_codes import HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Echo the path and path parameters."""
    return ResponseBuilder().json({"path": request.path, "params": request.path_params}).build()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        router = Router()
        route = router.add_route("/movie/:id", dummy_handler, method="get")

        assert router.routes() == [route]
        assert route.path == "/movie/:id"
        assert route.method == "GET"

    def test_match_with_method(self):
        """Same path, different methods, different routes."""
        router = Router()
        router.add_route("/movie/", dummy_handler, method="POST")
        router.add_route("/movie/:id", dummy_handler, method="GET")

        assert router.match("POST", "/movie/").route.method == "POST"
        assert router.match("GET", "/movie/42").route.method == "GET"
        assert router.match("GET", "/movie/") is None

    def test_match_dynamic_params(self):
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        match = router.match("GET", "/movie/1268390541766")

        assert match is not None
        assert match.params == {"id": "1268390541766"}

    def test_param_matches_one_segment(self):
        """A :param never spans a slash."""
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        assert router.match("GET", "/movie/1/2") is None

    def test_param_decoded_after_matching(self):
        """An encoded slash stays inside the segment and is decoded in the param."""
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        match = router.match("GET", "/movie/a%2Fb")

        assert match is not None
        assert match.params == {"id": "a/b"}

    def test_param_with_dots(self):
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        assert router.match("GET", "/movie/a..b").params == {"id": "a..b"}

    def test_trailing_slash_ignored(self):
        """Trailing slashes are ignored on both the pattern and the path."""
        router = Router()
        router.add_route("/movie/", dummy_handler, method="POST")
        router.add_route("/movie/:id", dummy_handler, method="GET")

        assert router.match("POST", "/movie") is not None
        assert router.match("POST", "/movie/") is not None
        assert router.match("GET", "/movie/7/").params == {"id": "7"}

    def test_root_path(self):
        router = Router()
        router.add_route("/", dummy_handler, method="GET")

        assert router.match("GET", "/") is not None
        assert router.match("GET", "/movie") is None

    def test_get_allowed_methods(self):
        router = Router()
        router.add_route("/movie/", dummy_handler, method="POST")

        assert router.get_allowed_methods("/movie/") == ["POST"]
        assert router.get_allowed_methods("/other") == []

    def test_handle_success(self):
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        response = router.handle(make_request("GET", "/movie/99"))

        assert response.status == HTTPStatus.OK
        assert response.json == {"path": "/movie/99", "params": {"id": "99"}}

    def test_handle_not_found(self):
        router = Router()
        router.add_route("/movie/:id", dummy_handler, method="GET")

        response = router.handle(make_request("GET", "/films"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.json == {"error": "No route matches /films"}

    def test_handle_method_not_allowed(self):
        router = Router()
        router.add_route("/movie/", dummy_handler, method="POST")

        response = router.handle(make_request("GET", "/movie/"))

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "POST"

    def test_handle_converts_http_error(self):
        """An HTTPError raised by a handler becomes its JSON response."""
        router = Router()

        def always_missing(request):
            raise HTTPError("no movies here", HTTPStatus.NOT_FOUND)

        router.add_route("/movie/:id", always_missing, method="GET")
        response = router.handle(make_request("GET", "/movie/1"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.json == {"error": "no movies here"}


class TestRouterDecorators:
    """Tests for decorator-style route registration."""

    def test_get_decorator(self):
        router = Router()

        @router.get("/movie/:id")
        def get_movie(request):
            return ResponseBuilder().text("movie").build()

        assert router.routes()[0].method == "GET"
        assert router.routes()[0].handler is get_movie

    def test_post_decorator(self):
        router = Router()

        @router.post("/movie/")
        def post_movie(request):
            return ResponseBuilder().text("movie").build()

        assert router.routes()[0].method == "POST"

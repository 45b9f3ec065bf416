"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler function.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /movie/1268390541766                                           │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  Registered routes                                          │   │
    │   │    GET  /movie/:id  → handlers.get_movie     ◄── match      │   │
    │   │    POST /movie/     → handlers.post_movie                   │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   request.path_params = {"id": "1268390541766"}                      │
    │   handlers.get_movie(request)                                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Patterns are plain paths with ":name" segments, each capturing exactly one
path segment. Trailing slashes are ignored on both sides, so "/movie/" and
"/movie" are the same route.

Handlers may raise HTTPError; handle() turns it into the error response.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, List
import logging
import re
from urllib.parse import unquote

from .errors import HTTPError
from .request import HTTPRequest
from .response import HTTPResponse, not_found, method_not_allowed


logger = logging.getLogger(__name__)


Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A URL pattern bound to a handler.

        Route(path="/movie/:id", method="GET", handler=get_movie,
              _param_names=["id"])
    """

    path: str
    method: Optional[str]            # None = any method
    handler: Handler
    name: Optional[str] = None

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """
    Result of a successful match.

        Pattern: /movie/:id
        Path:    /movie/42
        Result:  RouteMatch(route=<Route>, params={"id": "42"})
    """
    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router with dynamic path parameters.

        router = Router()

        @router.get("/movie/:id")
        def get_movie(request):
            movie_id = request.path_params["id"]
            ...

    First registered, first matched.
    """

    def __init__(self):
        self._routes: List[Route] = []

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern, e.g. /movie/:id
            handler: Callable taking a request and returning a response
            method: HTTP method, None for any
            name: Optional name, for logs and the route table

        Returns:
            The registered Route.
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            _pattern=pattern,
            _param_names=param_names,
        )

        self._routes.append(route)

        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a route pattern into an anchored regex.

            "/movie/:id"  →  ^/movie/(?P<id>[^/]+)$

        Empty segments are dropped, which is what makes a trailing slash
        in the pattern insignificant.
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")
        regex_parts.append("$")

        return re.compile("".join(regex_parts)), param_names

    @staticmethod
    def _normalize(path: str) -> str:
        """Leading slash, no trailing slash ("/" stays "/")."""
        return "/" + path.strip("/") if path != "/" else "/"

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Matching runs on the percent-encoded path; captured parameters
        are decoded afterwards, so "/movie/a%2Fb" gives {"id": "a/b"}.

        Returns:
            RouteMatch, or None if nothing matches.
        """
        path = self._normalize(path)

        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            if route._pattern:
                found = route._pattern.match(path)
                if found:
                    params = {k: unquote(v) for k, v in found.groupdict().items()}
                    return RouteMatch(route=route, params=params)

        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """
        Methods registered for a path, for the Allow header of a 405.
        """
        path = self._normalize(path)
        methods = set()

        for route in self._routes:
            if route._pattern and route._pattern.match(path):
                if route.method:
                    methods.add(route.method)
                else:
                    return ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

        return sorted(methods)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request.

        1. find the route (404 / 405 when there is none)
        2. inject path parameters
        3. call the handler
        4. an HTTPError raised by the handler becomes its error response
        """
        found = self.match(request.method, request.path)

        if found:
            request.path_params = found.params
            try:
                return found.route.handler(request)
            except HTTPError as e:
                logger.debug(f"{request.method} {request.path} -> {int(e.status)}: {e.message}")
                return e.to_response()

        allowed = self.get_allowed_methods(request.path)
        if allowed:
            return method_not_allowed(allowed)

        return not_found(f"No route matches {request.path}")

    # =========================================================================
    # DECORATORS
    # =========================================================================
    #
    #     @router.post("/movie/")
    #     def post_movie(request): ...
    #
    # is the same as router.add_route("/movie/", post_movie, method="POST").
    #
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(); returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST", name)

    def routes(self) -> List[Route]:
        """All registered routes, in match order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """Print the route table (shown in the startup banner)."""
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self.routes():
            method = route.method or "ANY"
            print(f"  {method:8} {route.path:24} {route.name or ''}")
        print("-" * 60)

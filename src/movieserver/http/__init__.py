"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between raw bytes and handler functions:

    request.py       bytes → HTTPRequest (RequestParser, HTTPParseError)
    response.py      HTTPResponse / ResponseBuilder → bytes
    router.py        (method, path) → handler, path parameters
    errors.py        HTTPError: exceptions that render as {"error": ...}
    status_codes.py  HTTPStatus enum with reason phrases

=============================================================================
"""

from .errors import HTTPError
from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                  # 200 OK
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    "HTTPError",

    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "not_found",
    "method_not_allowed",

    "Router",
    "Route",
    "RouteMatch",

    "HTTPStatus",
]

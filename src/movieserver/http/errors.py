"""
=============================================================================
HTTP ERRORS
=============================================================================

Exceptions that already know which response they become.

Handlers raise an HTTPError subclass instead of building an error response
by hand; the router catches it and calls to_response(). Every error body
has the same shape:

    {"error": "<message>"}

=============================================================================
"""

from .response import HTTPResponse, ResponseBuilder
from .status_codes import HTTPStatus


class HTTPError(Exception):
    """
    Base class for errors that map onto an HTTP status.

    Args:
        message: Text placed in the "error" field of the body.
        status: Status code of the response.
    """

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status: HTTPStatus | int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = HTTPStatus(status)

    @property
    def status_code(self) -> int:
        """Numeric status, kept for callers that compare against ints."""
        return int(self.status)

    def to_response(self) -> HTTPResponse:
        """Render as a JSON error response."""
        return ResponseBuilder().status(self.status).json({"error": self.message}).build()

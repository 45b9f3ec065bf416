"""
Errors the movie handlers raise.

Each one is an HTTPError, so the router answers it with its status and a
{"error": message} body.

    FailedToParseRequest   400  Failed to parse request: <detail>
    MovieNotFound          404  Movie <id> not found
    UnknownError           500  Unknown error
"""

from ..http.errors import HTTPError
from ..http.status_codes import HTTPStatus


class MovieError(HTTPError):
    """Base class for movie API errors."""


class FailedToParseRequest(MovieError):
    status = HTTPStatus.BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(f"Failed to parse request: {detail}")
        self.detail = detail


class MovieNotFound(MovieError):
    status = HTTPStatus.NOT_FOUND

    def __init__(self, movie_id: str):
        super().__init__(f"Movie {movie_id} not found")
        self.movie_id = movie_id


class UnknownError(MovieError):
    """Catch-all 500. No handler raises it today."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self):
        super().__init__("Unknown error")

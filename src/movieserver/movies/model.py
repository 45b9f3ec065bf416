"""
=============================================================================
MOVIE RECORDS AND WIRE TYPES
=============================================================================

Movie is what the store keeps. The wire types describe request and response
bodies only and are converted to and from Movie at the handler boundary:

    POST body ──► PostMovieRequest ──to_movie()──► Movie ──► store
                                                     │
    {"id": ...} ◄── PostMovieResponse ◄── MovieId ◄──┘

    /movie/:id ──► GetMovieRequest ──► store.get() ──► Movie
                                                         │
    {"name", "year", "was_good"} ◄── GetMovieResponse ◄──┘

PostMovieRequest does its own validation and raises SchemaError with a
detail string naming the offending field.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict
import json

from ..http.request import HTTPRequest


MovieId = str

U16_MAX = 65535


class SchemaError(ValueError):
    """A POST body that does not describe a movie."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class Movie:
    """A stored movie. Frozen, so the store can hand out the instance itself."""

    name: str
    year: int
    was_good: bool


# =============================================================================
# REQUEST / RESPONSE BODIES
# =============================================================================

_DESERIALIZE = "Failed to deserialize the JSON body into the target type"


@dataclass
class PostMovieRequest:
    name: str
    year: int
    was_good: bool

    @classmethod
    def from_request(cls, request: HTTPRequest) -> "PostMovieRequest":
        """
        Validate Content-Type, then the body.

        Raises:
            SchemaError: Wrong content type or invalid body.
        """
        if not request.is_json:
            raise SchemaError("Expected request with `Content-Type: application/json`")
        return cls.from_json(request.body)

    @classmethod
    def from_json(cls, body: bytes) -> "PostMovieRequest":
        """
        Parse and validate a JSON body.

        Fields are checked in the order name, year, was_good and the
        first problem is reported. Unknown fields are ignored.

        Raises:
            SchemaError: Not JSON, not an object, or a field is missing
                or has the wrong type.
        """
        try:
            data = json.loads(body.decode("utf-8"))
        except ValueError as e:
            # Oversized integers raise a plain ValueError, not JSONDecodeError.
            raise SchemaError(f"Failed to parse the request body as JSON: {e}")

        if not isinstance(data, dict):
            raise SchemaError(f"{_DESERIALIZE}: invalid type: expected struct PostMovieRequest")

        name = _field(data, "name")
        if not isinstance(name, str):
            raise SchemaError(f"{_DESERIALIZE}: name: invalid type: expected a string")
        try:
            name.encode("utf-8")
        except UnicodeEncodeError:
            raise SchemaError("Failed to parse the request body as JSON: name: lone surrogate in string")

        year = _field(data, "year")
        # bool is a subclass of int; JSON true is not a year.
        if isinstance(year, bool) or not isinstance(year, int):
            raise SchemaError(f"{_DESERIALIZE}: year: invalid type: expected u16")
        if not 0 <= year <= U16_MAX:
            raise SchemaError(f"{_DESERIALIZE}: year: invalid value: integer {year}, expected u16")

        was_good = _field(data, "was_good")
        if not isinstance(was_good, bool):
            raise SchemaError(f"{_DESERIALIZE}: was_good: invalid type: expected a boolean")

        return cls(name=name, year=year, was_good=was_good)

    def to_movie(self) -> Movie:
        return Movie(name=self.name, year=self.year, was_good=self.was_good)


def _field(data: Dict[str, Any], name: str) -> Any:
    if name not in data:
        raise SchemaError(f"{_DESERIALIZE}: missing field `{name}`")
    return data[name]


@dataclass
class PostMovieResponse:
    id: MovieId

    def to_dict(self) -> dict:
        return {"id": self.id}


@dataclass
class GetMovieRequest:
    id: MovieId

    @classmethod
    def from_path_params(cls, params: Dict[str, str]) -> "GetMovieRequest":
        return cls(id=params["id"])


@dataclass
class GetMovieResponse:
    name: str
    year: int
    was_good: bool

    @classmethod
    def from_movie(cls, movie: Movie) -> "GetMovieResponse":
        return cls(name=movie.name, year=movie.year, was_good=movie.was_good)

    def to_dict(self) -> dict:
        return {"name": self.name, "year": self.year, "was_good": self.was_good}

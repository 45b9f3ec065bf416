"""
The movie resource: records, ids, the store and the two endpoints.
"""

from .errors import MovieError, FailedToParseRequest, MovieNotFound, UnknownError
from .handlers import MovieHandlers
from .identity import generate_movie_id, siphash
from .model import (
    Movie,
    MovieId,
    SchemaError,
    PostMovieRequest,
    PostMovieResponse,
    GetMovieRequest,
    GetMovieResponse,
)
from .store import MovieStore

__all__ = [
    "Movie",
    "MovieId",
    "SchemaError",
    "PostMovieRequest",
    "PostMovieResponse",
    "GetMovieRequest",
    "GetMovieResponse",

    "generate_movie_id",
    "siphash",

    "MovieStore",
    "MovieHandlers",

    "MovieError",
    "FailedToParseRequest",
    "MovieNotFound",
    "UnknownError",
]

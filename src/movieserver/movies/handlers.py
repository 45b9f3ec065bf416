"""
=============================================================================
MOVIE ENDPOINTS
=============================================================================

    POST /movie/      create or replace, answers {"id": "<movie id>"}
    GET  /movie/:id   look up, answers {"name", "year", "was_good"}

Errors are raised, not returned; the router renders them:

    POST with a bad body      → FailedToParseRequest  400
    GET of an unknown id      → MovieNotFound         404

=============================================================================
"""

import logging
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok
from ..http.router import Router
from .errors import FailedToParseRequest, MovieNotFound
from .identity import generate_movie_id
from .model import (
    GetMovieRequest,
    GetMovieResponse,
    PostMovieRequest,
    PostMovieResponse,
    SchemaError,
)
from .store import MovieStore


logger = logging.getLogger(__name__)


class MovieHandlers:
    """
    Request handlers bound to one MovieStore.

        store = MovieStore()
        movies = MovieHandlers(store)
        movies.register(router)
    """

    def __init__(self, store: Optional[MovieStore] = None):
        self.store = store if store is not None else MovieStore()

    def register(self, router: Router) -> Router:
        """Add the movie routes to router."""
        router.get("/movie/:id", name="get_movie")(self.get_movie)
        router.post("/movie/", name="post_movie")(self.post_movie)
        return router

    def post_movie(self, request: HTTPRequest) -> HTTPResponse:
        """
        Store the posted movie under the id derived from its name.

        A movie already stored under that id is replaced whole.

        Raises:
            FailedToParseRequest: Wrong content type or invalid body.
        """
        try:
            body = PostMovieRequest.from_request(request)
        except SchemaError as e:
            raise FailedToParseRequest(e.detail)

        movie_id = generate_movie_id(body.name)
        inserted = self.store.upsert(movie_id, body.to_movie())

        logger.debug(
            f"{'Created' if inserted else 'Replaced'} {body.name!r} ({body.year}) as {movie_id}"
        )
        return ok(PostMovieResponse(id=movie_id).to_dict())

    def get_movie(self, request: HTTPRequest) -> HTTPResponse:
        """
        Raises:
            MovieNotFound: Nothing is stored under the id.
        """
        params = GetMovieRequest.from_path_params(request.path_params)

        movie = self.store.get(params.id)
        if movie is None:
            raise MovieNotFound(params.id)

        return ok(GetMovieResponse.from_movie(movie).to_dict())

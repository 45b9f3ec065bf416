"""
In-memory movie store.

One dict guarded by one lock. Every public method holds the lock for a
single dict operation, so concurrent requests see each insert or
overwrite whole or not at all.
"""

import threading
from typing import Dict, Optional

from .model import Movie, MovieId


class MovieStore:
    """
    Mapping from MovieId to Movie.

        store = MovieStore()
        store.upsert("42", Movie("Inception", 2010, True))   # True: inserted
        store.get("42")                                      # Movie(...)
        store.get("43")                                      # None
    """

    def __init__(self):
        self._movies: Dict[MovieId, Movie] = {}
        self._lock = threading.Lock()

    def get(self, movie_id: MovieId) -> Optional[Movie]:
        with self._lock:
            return self._movies.get(movie_id)

    def upsert(self, movie_id: MovieId, movie: Movie) -> bool:
        """
        Insert movie under movie_id, replacing any record already there.

        Returns:
            True if the id was new, False if a record was overwritten.
        """
        with self._lock:
            inserted = movie_id not in self._movies
            self._movies[movie_id] = movie
            return inserted

    def __len__(self) -> int:
        with self._lock:
            return len(self._movies)

    def __contains__(self, movie_id: object) -> bool:
        with self._lock:
            return movie_id in self._movies

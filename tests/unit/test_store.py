"""
Unit tests for the in-memory movie store.
"""

import threading

from movieserver.movies.model import Movie
from movieserver.movies.store import MovieStore


class TestMovieStore:
    """Tests for MovieStore."""

    def test_get_missing(self):
        assert MovieStore().get("1") is None

    def test_upsert_then_get(self):
        store = MovieStore()
        movie = Movie("Inception", 2010, True)

        assert store.upsert("1", movie) is True
        assert store.get("1") == movie
        assert len(store) == 1
        assert "1" in store

    def test_overwrite_replaces_whole_record(self):
        """A second upsert replaces every field; nothing is merged."""
        store = MovieStore()
        store.upsert("1", Movie("Inception", 2010, True))

        assert store.upsert("1", Movie("Inception", 1999, False)) is False
        assert store.get("1") == Movie("Inception", 1999, False)
        assert len(store) == 1

    def test_contains(self):
        store = MovieStore()
        store.upsert("1", Movie("Alien", 1979, True))

        assert "1" in store
        assert "2" not in store

    def test_concurrent_upserts(self):
        """Writers on many threads lose no records."""
        store = MovieStore()
        threads_count = 16
        per_thread = 200

        def writer(thread_index: int):
            for i in range(per_thread):
                store.upsert(f"{thread_index}-{i}", Movie(f"m{i}", i, i % 2 == 0))

        threads = [threading.Thread(target=writer, args=(t,)) for t in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == threads_count * per_thread
        assert store.get("3-7") == Movie("m7", 7, False)

    def test_concurrent_same_key(self):
        """Racing writes to one key leave exactly one complete record."""
        store = MovieStore()
        inserted = []
        candidates = [Movie("Dune", year, year % 2 == 0) for year in range(1984, 2000)]

        def writer(movie: Movie):
            inserted.append(store.upsert("dune", movie))

        threads = [threading.Thread(target=writer, args=(m,)) for m in candidates]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert inserted.count(True) == 1
        assert store.get("dune") in candidates

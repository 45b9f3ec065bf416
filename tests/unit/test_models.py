"""
Unit tests for movie records and request/response bodies.
"""

import dataclasses
import json

import pytest

from movieserver.http.request import HTTPRequest
from movieserver.movies.model import (
    Movie,
    SchemaError,
    PostMovieRequest,
    PostMovieResponse,
    GetMovieRequest,
    GetMovieResponse,
)


DESERIALIZE = "Failed to deserialize the JSON body into the target type"


def body(data) -> bytes:
    return json.dumps(data).encode("utf-8")


class TestMovie:
    """Tests for the stored record."""

    def test_frozen(self):
        movie = Movie("Inception", 2010, True)

        with pytest.raises(dataclasses.FrozenInstanceError):
            movie.year = 2011

    def test_equality(self):
        assert Movie("Alien", 1979, True) == Movie("Alien", 1979, True)


class TestPostMovieRequest:
    """Tests for POST body validation."""

    def test_valid_body(self):
        req = PostMovieRequest.from_json(body({"name": "Inception", "year": 2010, "was_good": True}))

        assert req == PostMovieRequest(name="Inception", year=2010, was_good=True)
        assert req.to_movie() == Movie("Inception", 2010, True)

    def test_extra_fields_ignored(self):
        req = PostMovieRequest.from_json(
            body({"name": "Alien", "year": 1979, "was_good": True, "director": "Scott"})
        )

        assert req.to_movie() == Movie("Alien", 1979, True)

    @pytest.mark.parametrize("year", [0, 65535])
    def test_year_bounds_accepted(self, year: int):
        req = PostMovieRequest.from_json(body({"name": "x", "year": year, "was_good": False}))

        assert req.year == year

    def test_not_json(self):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(b"{not json")

        assert exc_info.value.detail.startswith("Failed to parse the request body as JSON: ")

    def test_not_utf8(self):
        with pytest.raises(SchemaError, match="Failed to parse the request body as JSON"):
            PostMovieRequest.from_json(b"\xff\xfe")

    def test_empty_body(self):
        with pytest.raises(SchemaError, match="Failed to parse the request body as JSON"):
            PostMovieRequest.from_json(b"")

    def test_lone_surrogate_in_name(self):
        """A name that has no UTF-8 form cannot be hashed into an id."""
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(b'{"name": "\\ud800", "year": 2010, "was_good": true}')

        assert exc_info.value.detail.startswith("Failed to parse the request body as JSON: ")

    def test_integer_too_long_to_parse(self):
        raw = b'{"name": "x", "year": ' + b"9" * 5000 + b', "was_good": true}'

        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(raw)

        assert exc_info.value.detail.startswith("Failed to parse the request body as JSON: ")

    def test_not_an_object(self):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body(["Inception", 2010, True]))

        assert exc_info.value.detail == (
            f"{DESERIALIZE}: invalid type: expected struct PostMovieRequest"
        )

    @pytest.mark.parametrize("missing", ["name", "year", "was_good"])
    def test_missing_field(self, missing: str):
        data = {"name": "Inception", "year": 2010, "was_good": True}
        del data[missing]

        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body(data))

        assert exc_info.value.detail == f"{DESERIALIZE}: missing field `{missing}`"

    def test_first_problem_reported(self):
        """Fields are checked in order name, year, was_good."""
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body({"name": 5}))

        assert "name: invalid type" in exc_info.value.detail

    def test_name_not_string(self):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body({"name": None, "year": 2010, "was_good": True}))

        assert exc_info.value.detail == f"{DESERIALIZE}: name: invalid type: expected a string"

    @pytest.mark.parametrize("year", ["2010", 2010.5, True, None])
    def test_year_wrong_type(self, year):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body({"name": "x", "year": year, "was_good": True}))

        assert exc_info.value.detail == f"{DESERIALIZE}: year: invalid type: expected u16"

    @pytest.mark.parametrize("year", [-1, 65536])
    def test_year_out_of_range(self, year: int):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body({"name": "x", "year": year, "was_good": True}))

        assert exc_info.value.detail == (
            f"{DESERIALIZE}: year: invalid value: integer {year}, expected u16"
        )

    @pytest.mark.parametrize("was_good", ["yes", 1, None])
    def test_was_good_not_bool(self, was_good):
        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_json(body({"name": "x", "year": 2000, "was_good": was_good}))

        assert exc_info.value.detail == f"{DESERIALIZE}: was_good: invalid type: expected a boolean"

    def test_from_request_requires_json_content_type(self):
        request = HTTPRequest(
            method="POST",
            path="/movie/",
            headers={"content-type": "text/plain"},
            body=body({"name": "x", "year": 1, "was_good": True}),
        )

        with pytest.raises(SchemaError) as exc_info:
            PostMovieRequest.from_request(request)

        assert exc_info.value.detail == "Expected request with `Content-Type: application/json`"

    def test_from_request(self):
        request = HTTPRequest(
            method="POST",
            path="/movie/",
            headers={"content-type": "application/json; charset=utf-8"},
            body=body({"name": "x", "year": 1, "was_good": False}),
        )

        assert PostMovieRequest.from_request(request).to_movie() == Movie("x", 1, False)


class TestResponseBodies:
    """Tests for the remaining wire types."""

    def test_post_response(self):
        assert PostMovieResponse(id="42").to_dict() == {"id": "42"}

    def test_get_request_from_path_params(self):
        assert GetMovieRequest.from_path_params({"id": "42"}).id == "42"

    def test_get_response_from_movie(self):
        response = GetMovieResponse.from_movie(Movie("Inception", 2010, True))

        assert response.to_dict() == {"name": "Inception", "year": 2010, "was_good": True}

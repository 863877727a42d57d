"""Tests for the asynchronous TheMealDB client."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from recipe_explorer.client import MealDbClient
from recipe_explorer.exceptions import (
    ApiTimeoutError,
    ConnectionError_,
    NotFoundError,
    ResponseParseError,
    ServerError,
)
from recipe_explorer.models import ApiConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _meal(meal_id: str, name: str, category: str = "Seafood") -> dict[str, Any]:
    return {"idMeal": meal_id, "strMeal": name, "strCategory": category}


def _client(
    handler: Callable[[httpx.Request], Any],
    **config: Any,
) -> MealDbClient:
    """Build a client whose requests are answered by *handler*, with no backoff."""
    api = ApiConfig(base_url="https://meals.test/api/json/v1/1", **config)
    return MealDbClient(api, transport=httpx.MockTransport(handler), retry_delay=0)


def _meals_response(meals: list[dict[str, Any]] | None, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"meals": meals})


class Recorder:
    """Request handler that records requests and answers from a routing function."""

    def __init__(self, route: Callable[[httpx.Request], httpx.Response]) -> None:
        self.route = route
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.route(request)


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    @pytest.mark.asyncio
    async def test_enter_creates_and_exit_closes_client(self) -> None:
        client = _client(lambda request: _meals_response(None))
        assert client._client is None
        async with client:
            assert client._client is not None
        assert client._client is None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_search_by_name(self) -> None:
        recorder = Recorder(lambda request: _meals_response([_meal("1", "Chicken Curry")]))
        async with _client(recorder) as client:
            meals = await client.search_meals_by_name("chicken")
        assert meals == [_meal("1", "Chicken Curry")]
        request = recorder.requests[0]
        assert request.url.path == "/api/json/v1/1/search.php"
        assert request.url.params["s"] == "chicken"

    @pytest.mark.asyncio
    async def test_null_meals_is_empty_list(self) -> None:
        async with _client(lambda request: _meals_response(None)) as client:
            assert await client.search_meals_by_name("zzzz") == []

    @pytest.mark.asyncio
    async def test_lookup_returns_first_or_none(self) -> None:
        def route(request: httpx.Request) -> httpx.Response:
            if request.url.params["i"] == "52772":
                return _meals_response([_meal("52772", "Teriyaki Chicken Casserole")])
            return _meals_response(None)

        async with _client(route) as client:
            assert (await client.get_meal_by_id("52772"))["strMeal"] == "Teriyaki Chicken Casserole"
            assert await client.get_meal_by_id("0") is None

    @pytest.mark.asyncio
    async def test_first_letter_merges_dedupes_and_sorts(self) -> None:
        by_letter = {
            "a": [_meal("2", "apple frangipan"), _meal("1", "Apam balik")],
            "b": [_meal("3", "Bakewell tart"), _meal("1", "Apam balik")],
        }
        recorder = Recorder(lambda request: _meals_response(by_letter[request.url.params["f"]]))
        async with _client(recorder) as client:
            meals = await client.search_meals_by_first_letter(["a", "b"])
        assert [m["idMeal"] for m in meals] == ["1", "2", "3"]
        assert sorted(r.url.params["f"] for r in recorder.requests) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_ingredient_results(self) -> None:
        recorder = Recorder(lambda request: _meals_response([_meal("9", "Salmon Avocado Salad")]))
        async with _client(recorder) as client:
            meals = await client.get_meals_by_ingredient("salmon")
        assert meals == [_meal("9", "Salmon Avocado Salad")]
        assert recorder.requests[0].url.path.endswith("/filter.php")
        assert recorder.requests[0].url.params["i"] == "salmon"

    @pytest.mark.asyncio
    async def test_ingredient_without_matches_is_a_message(self) -> None:
        async with _client(lambda request: _meals_response(None)) as client:
            result = await client.get_meals_by_ingredient("unobtainium")
        assert result == 'No recipes found with ingredient "unobtainium"'

    @pytest.mark.asyncio
    async def test_ingredient_timeout(self) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return _meals_response(None)

        async with _client(slow) as client:
            with pytest.raises(ApiTimeoutError, match="took longer than 0.01s") as exc_info:
                await client.get_meals_by_ingredient("salmon", timeout=0.01)
        assert exc_info.value.exit_code == 6

    @pytest.mark.asyncio
    async def test_random(self) -> None:
        recorder = Recorder(lambda request: _meals_response([_meal("7", "Kumpir")]))
        async with _client(recorder) as client:
            assert (await client.get_random_meal())["idMeal"] == "7"
        assert recorder.requests[0].url.path.endswith("/random.php")

    @pytest.mark.asyncio
    async def test_related_excludes_self_and_respects_limit(self) -> None:
        category_meals = [_meal(str(i), f"Fish {i}") for i in range(1, 10)]
        recorder = Recorder(lambda request: _meals_response(category_meals))
        async with _client(recorder, related_limit=3) as client:
            related = await client.get_related_recipes(_meal("2", "Fish 2"))
        assert [m["idMeal"] for m in related] == ["1", "3", "4"]
        assert recorder.requests[0].url.params["c"] == "Seafood"

    @pytest.mark.asyncio
    async def test_related_without_category_makes_no_request(self) -> None:
        recorder = Recorder(lambda request: _meals_response([]))
        async with _client(recorder) as client:
            assert await client.get_related_recipes({"idMeal": "1"}) == []
        assert recorder.requests == []


# ---------------------------------------------------------------------------
# Errors and retries
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_404_raises_not_found(self) -> None:
        async with _client(lambda request: httpx.Response(404, text="nope")) as client:
            with pytest.raises(NotFoundError, match="HTTP 404"):
                await client.search_meals_by_name("x")

    @pytest.mark.asyncio
    async def test_4xx_raises_server_error(self) -> None:
        async with _client(lambda request: httpx.Response(429, text="slow down")) as client:
            with pytest.raises(ServerError, match="HTTP 429: slow down"):
                await client.search_meals_by_name("x")

    @pytest.mark.asyncio
    async def test_5xx_is_retried_then_raised(self) -> None:
        recorder = Recorder(lambda request: httpx.Response(503, text="down"))
        async with _client(recorder, max_retries=2) as client:
            with pytest.raises(ServerError, match="HTTP 503"):
                await client.search_meals_by_name("x")
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_5xx_then_success(self) -> None:
        responses = [httpx.Response(500), _meals_response([_meal("1", "A")])]
        recorder = Recorder(lambda request: responses.pop(0))
        async with _client(recorder) as client:
            assert await client.search_meals_by_name("a") == [_meal("1", "A")]
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_connection_error_after_retries(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        recorder = Recorder(refuse)
        async with _client(recorder, max_retries=1) as client:
            with pytest.raises(ConnectionError_, match="after 2 attempts") as exc_info:
                await client.get_random_meal()
        assert exc_info.value.exit_code == 6
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error_type",
        [httpx.RemoteProtocolError, httpx.ProxyError, httpx.UnsupportedProtocol],
    )
    async def test_other_transport_errors_are_connection_errors(self, error_type) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise error_type("server disconnected", request=request)

        recorder = Recorder(fail)
        async with _client(recorder, max_retries=1) as client:
            with pytest.raises(ConnectionError_):
                await client.search_meals_by_name("chicken")
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_invalid_json_raises_parse_error(self) -> None:
        async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ResponseParseError):
                await client.search_meals_by_name("x")

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises_parse_error(self) -> None:
        async with _client(lambda request: httpx.Response(200, json={"meals": "nope"})) as client:
            with pytest.raises(ResponseParseError):
                await client.search_meals_by_name("x")

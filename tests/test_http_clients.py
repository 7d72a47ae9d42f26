"""Tests for HTTP-based adapters."""

import asyncio

import httpx

from macro_tracker.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


def _client(handler) -> HttpxOpenFoodFactsClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        user_agent="tests",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_openfoodfacts_search_returns_products() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"count": 2, "products": [{"product_name": "Skyr"}, "junk"]},
        )

    client = _client(handler)
    products = asyncio.run(client.search("skyr", page_size=5))

    assert products == [{"product_name": "Skyr"}]
    request = seen[0]
    assert request.url.path == "/cgi/search.pl"
    assert request.url.params["search_terms"] == "skyr"
    assert request.url.params["page_size"] == "5"
    assert request.url.params["json"] == "1"
    assert "nutriments" in request.url.params["fields"]
    asyncio.run(client.close())


def test_openfoodfacts_server_error_returns_empty() -> None:
    client = _client(lambda request: httpx.Response(500, text="boom"))

    assert asyncio.run(client.search("skyr")) == []


def test_openfoodfacts_timeout_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert asyncio.run(_client(handler).search("skyr")) == []


def test_openfoodfacts_connection_error_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert asyncio.run(_client(handler).search("skyr")) == []


def test_openfoodfacts_malformed_payloads_return_empty() -> None:
    bodies = [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["not", "a", "dict"]),
        httpx.Response(200, json={"products": None}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return bodies.pop(0)

    client = _client(handler)

    assert [asyncio.run(client.search("skyr")) for _ in range(3)] == [[], [], []]


def test_openfoodfacts_create_sets_user_agent() -> None:
    client = HttpxOpenFoodFactsClient.create(
        base_url="https://off.test", user_agent="MacroTracker/test"
    )

    assert client.http_client.headers["User-Agent"] == "MacroTracker/test"
    asyncio.run(client.close())

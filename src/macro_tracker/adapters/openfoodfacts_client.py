"""Open Food Facts search client."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

_logger = logging.getLogger(__name__)

_SEARCH_FIELDS = ",".join(
    [
        "code",
        "product_name",
        "generic_name",
        "brands",
        "categories_tags",
        "nutriments",
        "serving_quantity",
        "serving_quantity_unit",
        "serving_size",
    ]
)


class FoodDatabaseClient(Protocol):
    """Interface for third-party food database searches."""

    async def search(self, term: str, page_size: int = 10) -> list[dict[str, object]]:
        """Return raw candidate products; empty on any failure."""


@dataclass
class HttpxOpenFoodFactsClient(FoodDatabaseClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 5.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 5.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def search(self, term: str, page_size: int = 10) -> list[dict[str, object]]:
        """Full-text product search returning several candidates."""
        url = f"{self.base_url}/cgi/search.pl"
        try:
            response = await self.http_client.get(
                url,
                params={
                    "search_terms": term,
                    "search_simple": 1,
                    "action": "process",
                    "json": 1,
                    "page_size": page_size,
                    "fields": _SEARCH_FIELDS,
                },
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Open Food Facts search failed for %r: %s", term, exc)
            return []
        if not isinstance(payload, dict):
            return []
        products = payload.get("products")
        if not isinstance(products, list):
            return []
        return [product for product in products if isinstance(product, dict)]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

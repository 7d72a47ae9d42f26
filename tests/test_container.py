"""Tests for container wiring."""

import asyncio

from macro_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.meal_entry_service.pipeline is container.pipeline
    assert container.pipeline.products is container.product_service
    assert container.pipeline.resolver.provider == "openfoodfacts"
    asyncio.run(container.close_resources())

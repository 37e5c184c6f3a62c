"""Tests for container wiring."""

import asyncio

from household_hub.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.suggestion_service is not None
    assert container.item_service.cache is container.chore_service.cache
    asyncio.run(container.close_resources())

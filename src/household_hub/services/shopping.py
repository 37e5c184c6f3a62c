"""Shopping list management."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from household_hub.domain.shopping import ShoppingList, ShoppingListDetail
from household_hub.services.cache import QueryCache, scoped_key
from household_hub.services.catalog import parse_quantity

_logger = logging.getLogger(__name__)


class ShoppingRepository(Protocol):
    """Persistence interface for shopping lists."""

    async def list_lists(self, token: str) -> list[ShoppingList]:
        """Return active shopping lists."""

    async def get_list(self, token: str, list_id: str) -> ShoppingListDetail | None:
        """Return a shopping list with its lines, if present."""

    async def create_list(self, token: str, title: str) -> ShoppingList:
        """Create a shopping list."""

    async def add_line(
        self, token: str, list_id: str, payload: dict[str, object]
    ) -> None:
        """Add an item line to a list."""

    async def remove_line(self, token: str, list_id: str, line_id: str) -> None:
        """Remove an item line from a list."""

    async def archive_list(self, token: str, list_id: str) -> None:
        """Archive a shopping list."""


@dataclass
class ShoppingService:
    """Application service for shopping lists."""

    repository: ShoppingRepository
    cache: QueryCache

    async def list_lists(self, token: str) -> list[ShoppingList]:
        """Return the house's shopping lists."""
        lists = await self.cache.fetch(
            scoped_key(token, "lists"), lambda: self.repository.list_lists(token)
        )
        return list(lists)

    async def get_list(self, token: str, list_id: str) -> ShoppingListDetail | None:
        """Return a list with its lines."""
        key = self._detail_key(token, list_id)
        cached = self.cache.get(key)
        if isinstance(cached, ShoppingListDetail):
            return cached
        detail = await self.repository.get_list(token, list_id)
        if detail is not None:
            self.cache.set(key, detail)
        return detail

    async def create_list(self, token: str, title: str) -> ShoppingList:
        """Create a new list."""
        cleaned = title.strip()
        if not cleaned:
            raise ValueError("title_required")
        created = await self.repository.create_list(token, cleaned)
        self.cache.invalidate(scoped_key(token, "lists"))
        return created

    async def add_line(
        self, token: str, list_id: str, item_id: str, quantity: object
    ) -> ShoppingListDetail | None:
        """Add an item to a list and return the refreshed list."""
        if not item_id.strip():
            raise ValueError("item_required")
        await self.repository.add_line(
            token,
            list_id,
            {"itemId": item_id.strip(), "quantity": str(parse_quantity(quantity))},
        )
        self._invalidate_list(token, list_id)
        return await self.get_list(token, list_id)

    async def remove_line(self, token: str, list_id: str, line_id: str) -> None:
        """Remove a line, hiding it from the cached list right away."""
        pending = self.cache.apply_optimistic(
            self._detail_key(token, list_id),
            lambda detail: replace(
                detail,  # type: ignore[type-var]
                lines=tuple(
                    line
                    for line in detail.lines  # type: ignore[attr-defined]
                    if line.id != line_id
                ),
            ),
        )
        try:
            await self.repository.remove_line(token, list_id, line_id)
        except Exception:
            _logger.warning("Removing line %s from %s failed", line_id, list_id)
            if pending is not None:
                self.cache.rollback(pending)
            raise
        if pending is not None:
            self.cache.confirm(pending)
        self.cache.invalidate(scoped_key(token, "lists"))

    async def archive_list(self, token: str, list_id: str) -> None:
        """Archive a list."""
        await self.repository.archive_list(token, list_id)
        self._invalidate_list(token, list_id)

    def _invalidate_list(self, token: str, list_id: str) -> None:
        self.cache.invalidate(self._detail_key(token, list_id))
        self.cache.invalidate(scoped_key(token, "lists"))

    @staticmethod
    def _detail_key(token: str, list_id: str) -> str:
        return scoped_key(token, "list", list_id)

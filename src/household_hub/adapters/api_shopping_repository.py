"""Backend implementation of the shopping list repository."""

from dataclasses import dataclass

from household_hub.adapters.api_catalog_repository import parse_decimal, parse_item
from household_hub.adapters.api_chore_repository import parse_timestamp
from household_hub.adapters.api_client import ApiClient
from household_hub.domain.shopping import (
    ShoppingList,
    ShoppingListDetail,
    ShoppingListLine,
)
from household_hub.services.shopping import ShoppingRepository


@dataclass
class ApiShoppingRepository(ShoppingRepository):
    """REST-backed shopping list repository."""

    client: ApiClient

    async def list_lists(self, token: str) -> list[ShoppingList]:
        """Return active shopping lists."""
        data = await self.client.get("/shopping-lists", token=token)
        if not isinstance(data, list):
            return []
        return [_parse_list(row) for row in data]

    async def get_list(self, token: str, list_id: str) -> ShoppingListDetail | None:
        """Return a shopping list with its lines, if present."""
        data = await self.client.get(f"/shopping-lists/{list_id}", token=token)
        if not isinstance(data, dict):
            return None
        lines = data.get("items") or []
        return ShoppingListDetail(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            lines=tuple(
                _parse_line(row) for row in lines  # type: ignore[attr-defined]
            ),
        )

    async def create_list(self, token: str, title: str) -> ShoppingList:
        """Create a shopping list."""
        data = await self.client.post(
            "/shopping-lists",
            token=token,
            json={"title": title},
            default_error="create_list_failed",
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to create shopping list")
        return _parse_list(data)

    async def add_line(
        self, token: str, list_id: str, payload: dict[str, object]
    ) -> None:
        """Add an item line to a list."""
        await self.client.post(
            f"/shopping-lists/{list_id}/items",
            token=token,
            json=payload,
            default_error="add_line_failed",
        )

    async def remove_line(self, token: str, list_id: str, line_id: str) -> None:
        """Remove an item line from a list."""
        await self.client.delete(
            f"/shopping-lists/{list_id}/items/{line_id}",
            token=token,
            default_error="remove_line_failed",
        )

    async def archive_list(self, token: str, list_id: str) -> None:
        """Archive a shopping list."""
        await self.client.post(
            f"/shopping-lists/{list_id}/archive",
            token=token,
            default_error="archive_list_failed",
        )


def _parse_list(row: dict[str, object]) -> ShoppingList:
    """Parse a shopping list summary row."""
    counts = row.get("_count")
    item_count = counts.get("items", 0) if isinstance(counts, dict) else 0
    return ShoppingList(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        is_archived=bool(row.get("isArchived", False)),
        updated_at=parse_timestamp(row.get("updatedAt")),
        item_count=int(item_count or 0),
    )


def _parse_line(row: dict[str, object]) -> ShoppingListLine:
    """Parse a shopping list line row."""
    item_row = row.get("item")
    item = parse_item(item_row) if isinstance(item_row, dict) else None
    return ShoppingListLine(
        id=str(row["id"]),
        list_id=str(row.get("listId", "")),
        item_id=str(row.get("itemId") or (item.id if item else "")),
        quantity=parse_decimal(row.get("quantity", "0")),
        item=item,
        unit_override=row.get("unitOverride") or None,  # type: ignore[arg-type]
        note=row.get("note") or None,  # type: ignore[arg-type]
    )

"""Domain models for shopping lists."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from household_hub.domain.catalog import Item


@dataclass(frozen=True)
class ShoppingList:
    """Summary row of a shopping list."""

    id: str
    title: str
    is_archived: bool
    updated_at: datetime | None
    item_count: int


@dataclass(frozen=True)
class ShoppingListLine:
    """Item line on a shopping list."""

    id: str
    list_id: str
    item_id: str
    quantity: Decimal
    item: Item | None
    unit_override: str | None = None
    note: str | None = None

    @property
    def display_unit(self) -> str:
        """Unit shown next to the quantity."""
        if self.unit_override:
            return self.unit_override
        if self.item is not None:
            return self.item.unit
        return ""


@dataclass(frozen=True)
class ShoppingListDetail:
    """Shopping list with its lines."""

    id: str
    title: str
    lines: tuple[ShoppingListLine, ...]

"""Services for the global item catalog and recipe administration."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Protocol

from household_hub.domain.catalog import (
    Item,
    ItemCategory,
    Recipe,
    RecipeIngredient,
    RecipeType,
    Unit,
)
from household_hub.services.cache import QueryCache, scoped_key


class CatalogStore(Protocol):
    """Read-only source of items and recipes."""

    async def get_recipes(
        self, token: str, recipe_type: RecipeType | None = None
    ) -> list[Recipe]:
        """Return recipes with their ingredient lines."""

    async def get_items(self, token: str) -> list[Item]:
        """Return every catalog item, archived ones included."""


class ItemRepository(Protocol):
    """Persistence interface for catalog items."""

    async def list_items(
        self, token: str, query: str | None, category: str | None, archived: bool
    ) -> list[Item]:
        """Return items matching the filters."""

    async def create_item(self, token: str, payload: dict[str, object]) -> Item:
        """Create an item and return it."""

    async def update_item(
        self, token: str, item_id: str, payload: dict[str, object]
    ) -> Item:
        """Update an item and return it."""

    async def delete_item(self, token: str, item_id: str) -> None:
        """Delete an item."""


class RecipeRepository(Protocol):
    """Persistence interface for recipes and their ingredient lines."""

    async def list_recipes(
        self, token: str, query: str | None, recipe_type: RecipeType | None
    ) -> list[Recipe]:
        """Return recipes matching the filters."""

    async def get_recipe(self, token: str, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""

    async def create_recipe(self, token: str, payload: dict[str, object]) -> Recipe:
        """Create a recipe and return it."""

    async def update_recipe(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> Recipe:
        """Update a recipe and return it."""

    async def delete_recipe(self, token: str, recipe_id: str) -> None:
        """Delete a recipe."""

    async def add_ingredient(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> RecipeIngredient:
        """Add an ingredient line to a recipe."""

    async def update_ingredient(
        self,
        token: str,
        recipe_id: str,
        ingredient_id: str,
        payload: dict[str, object],
    ) -> RecipeIngredient:
        """Update an ingredient line."""

    async def delete_ingredient(
        self, token: str, recipe_id: str, ingredient_id: str
    ) -> None:
        """Remove an ingredient line."""


def split_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Parse comma-separated tags, dropping blanks."""
    if raw is None:
        return []
    chunks = raw.split(",") if isinstance(raw, str) else raw
    return [tag.strip() for tag in chunks if tag.strip()]


def parse_quantity(raw: object) -> Decimal:
    """Parse a non-negative decimal quantity sent as a string or number."""
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid quantity: {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValueError(f"invalid quantity: {raw!r}")
    return value


def group_items_by_category(items: Iterable[Item]) -> dict[str, list[Item]]:
    """Group items by category, each group sorted by name."""
    grouped: dict[str, list[Item]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    for group in grouped.values():
        group.sort(key=lambda item: item.name.casefold())
    return grouped


def _require_text(value: object, field: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValueError(f"{field}_required")
    return text


@dataclass
class ItemService:
    """Application service for the global item catalog."""

    repository: ItemRepository
    cache: QueryCache

    async def list_items(
        self,
        token: str,
        query: str | None = None,
        category: str | None = None,
        archived: bool = False,
    ) -> list[Item]:
        """List items, cached per filter combination."""
        cleaned = (query or "").strip() or None
        key = scoped_key(
            token, "items", cleaned or "", category or "", str(archived).lower()
        )
        result = await self.cache.fetch(
            key,
            lambda: self.repository.list_items(token, cleaned, category, archived),
        )
        return list(result)

    async def list_grouped(self, token: str) -> dict[str, list[Item]]:
        """Return active items grouped by category."""
        return group_items_by_category(await self.list_items(token))

    async def create_item(
        self,
        token: str,
        name: str,
        category: ItemCategory,
        unit: Unit,
        tags: str | list[str] | None = None,
    ) -> Item:
        """Create a catalog item."""
        payload: dict[str, object] = {
            "name": _require_text(name, "name"),
            "category": category.value,
            "unit": unit.value,
            "tags": split_tags(tags),
        }
        item = await self.repository.create_item(token, payload)
        self.cache.invalidate(scoped_key(token, "items"))
        return item

    async def update_item(
        self, token: str, item_id: str, changes: dict[str, object]
    ) -> Item:
        """Patch name, category, unit or tags of an item."""
        payload: dict[str, object] = {}
        if "name" in changes:
            payload["name"] = _require_text(changes["name"], "name")
        if "category" in changes:
            payload["category"] = ItemCategory(changes["category"]).value
        if "unit" in changes:
            payload["unit"] = Unit(changes["unit"]).value
        if "tags" in changes:
            payload["tags"] = split_tags(changes["tags"])  # type: ignore[arg-type]
        item = await self.repository.update_item(token, item_id, payload)
        self.cache.invalidate(scoped_key(token, "items"))
        return item

    async def delete_item(self, token: str, item_id: str) -> None:
        """Delete a catalog item."""
        await self.repository.delete_item(token, item_id)
        self.cache.invalidate(scoped_key(token, "items"))


@dataclass
class RecipeService:
    """Application service for recipe administration."""

    repository: RecipeRepository
    cache: QueryCache

    async def list_recipes(
        self,
        token: str,
        query: str | None = None,
        recipe_type: RecipeType | None = None,
    ) -> list[Recipe]:
        """List recipes by title search and type."""
        cleaned = (query or "").strip() or None
        key = scoped_key(
            token,
            "recipes",
            "list",
            cleaned or "",
            recipe_type.value if recipe_type else "",
        )
        result = await self.cache.fetch(
            key, lambda: self.repository.list_recipes(token, cleaned, recipe_type)
        )
        return list(result)

    async def get_recipe(self, token: str, recipe_id: str) -> Recipe | None:
        """Return a recipe with its ingredient lines."""
        cached = self.cache.get(scoped_key(token, "recipes", "detail", recipe_id))
        if isinstance(cached, Recipe):
            return cached
        recipe = await self.repository.get_recipe(token, recipe_id)
        if recipe is not None:
            self.cache.set(scoped_key(token, "recipes", "detail", recipe_id), recipe)
        return recipe

    async def create_recipe(  # noqa: PLR0913
        self,
        token: str,
        title: str,
        recipe_type: RecipeType,
        tags: str | list[str] | None = None,
        notes: str | None = None,
        text: str | None = None,
    ) -> Recipe:
        """Create a recipe without ingredients."""
        payload: dict[str, object] = {
            "title": _require_text(title, "title"),
            "type": recipe_type.value,
            "tags": split_tags(tags),
            "notes": notes or None,
            "text": text or None,
        }
        recipe = await self.repository.create_recipe(token, payload)
        self._invalidate(token)
        return recipe

    async def update_recipe(
        self, token: str, recipe_id: str, changes: dict[str, object]
    ) -> Recipe:
        """Patch recipe fields; ``None`` clears notes or text."""
        payload: dict[str, object] = {}
        if "title" in changes:
            payload["title"] = _require_text(changes["title"], "title")
        if "type" in changes:
            payload["type"] = RecipeType(changes["type"]).value
        if "tags" in changes:
            payload["tags"] = split_tags(changes["tags"])  # type: ignore[arg-type]
        for field in ("notes", "text"):
            if field in changes:
                payload[field] = changes[field] or None
        recipe = await self.repository.update_recipe(token, recipe_id, payload)
        self._invalidate(token)
        return recipe

    async def delete_recipe(self, token: str, recipe_id: str) -> None:
        """Delete a recipe."""
        await self.repository.delete_recipe(token, recipe_id)
        self._invalidate(token)

    async def add_ingredient(
        self,
        token: str,
        recipe_id: str,
        item_id: str,
        quantity: object,
        unit_override: str | None = None,
    ) -> RecipeIngredient:
        """Add an ingredient line."""
        payload: dict[str, object] = {
            "itemId": _require_text(item_id, "item"),
            "quantity": str(parse_quantity(quantity)),
            "unitOverride": (unit_override or "").strip() or None,
        }
        ingredient = await self.repository.add_ingredient(token, recipe_id, payload)
        self._invalidate(token)
        return ingredient

    async def update_ingredient(
        self,
        token: str,
        recipe_id: str,
        ingredient_id: str,
        changes: dict[str, object],
    ) -> RecipeIngredient:
        """Patch quantity or unit override of an ingredient line."""
        payload: dict[str, object] = {}
        if "quantity" in changes:
            payload["quantity"] = str(parse_quantity(changes["quantity"]))
        if "unit_override" in changes:
            payload["unitOverride"] = (
                str(changes["unit_override"] or "").strip() or None
            )
        ingredient = await self.repository.update_ingredient(
            token, recipe_id, ingredient_id, payload
        )
        self._invalidate(token)
        return ingredient

    async def delete_ingredient(
        self, token: str, recipe_id: str, ingredient_id: str
    ) -> None:
        """Remove an ingredient line."""
        await self.repository.delete_ingredient(token, recipe_id, ingredient_id)
        self._invalidate(token)

    def _invalidate(self, token: str) -> None:
        self.cache.invalidate(scoped_key(token, "recipes"))

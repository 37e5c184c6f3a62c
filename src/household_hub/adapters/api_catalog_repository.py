"""Backend implementation of the item catalog and recipe repositories."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from http import HTTPStatus

from household_hub.adapters.api_client import ApiClient, BackendError
from household_hub.domain.catalog import Item, Recipe, RecipeIngredient, RecipeType
from household_hub.services.catalog import (
    CatalogStore,
    ItemRepository,
    RecipeRepository,
)

_logger = logging.getLogger(__name__)


@dataclass
class ApiCatalogRepository(CatalogStore, ItemRepository, RecipeRepository):
    """REST-backed repository for items and recipes."""

    client: ApiClient

    async def get_items(self, token: str) -> list[Item]:
        """Return every item, archived ones included."""
        return await self.list_items(token, query=None, category=None, archived=True)

    async def get_recipes(
        self, token: str, recipe_type: RecipeType | None = None
    ) -> list[Recipe]:
        """Return recipes with ingredient lines in a single list request.

        Rows the backend still sends without ingredients are loaded one by
        one; recipes deleted in the meantime are skipped.
        """
        params = {"include": "ingredients"}
        if recipe_type:
            params["type"] = recipe_type.value
        data = await self.client.get("/recipes", token=token, params=params)
        recipes = []
        for row in _recipe_rows(data):
            if "ingredients" in row:
                recipes.append(parse_recipe(row))
                continue
            try:
                detail = await self.get_recipe(token, str(row["id"]))
            except BackendError as exc:
                if exc.status_code != HTTPStatus.NOT_FOUND:
                    raise
                _logger.info("Recipe %s disappeared, skipping", row["id"])
                continue
            if detail is not None:
                recipes.append(detail)
        return recipes

    async def list_items(
        self, token: str, query: str | None, category: str | None, archived: bool
    ) -> list[Item]:
        """Return items matching the filters."""
        params: dict[str, str] = {}
        if query:
            params["q"] = query
        if category:
            params["category"] = category
        if archived:
            params["archived"] = "true"
        data = await self.client.get("/items", token=token, params=params or None)
        return [parse_item(row) for row in data or []]  # type: ignore[union-attr]

    async def create_item(self, token: str, payload: dict[str, object]) -> Item:
        """Create an item and return it."""
        data = await self.client.post(
            "/items", token=token, json=payload, default_error="add_item_failed"
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to create item")
        return parse_item(data)

    async def update_item(
        self, token: str, item_id: str, payload: dict[str, object]
    ) -> Item:
        """Update an item and return it."""
        data = await self.client.patch(
            f"/items/{item_id}",
            token=token,
            json=payload,
            default_error="update_item_failed",
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to update item")
        return parse_item(data)

    async def delete_item(self, token: str, item_id: str) -> None:
        """Delete an item."""
        await self.client.delete(
            f"/items/{item_id}", token=token, default_error="delete_item_failed"
        )

    async def list_recipes(
        self, token: str, query: str | None, recipe_type: RecipeType | None
    ) -> list[Recipe]:
        """Return recipes matching the filters."""
        params: dict[str, str] = {}
        if query:
            params["q"] = query
        if recipe_type:
            params["type"] = recipe_type.value
        data = await self.client.get("/recipes", token=token, params=params or None)
        return [parse_recipe(row) for row in _recipe_rows(data)]

    async def get_recipe(self, token: str, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""
        data = await self.client.get(f"/recipes/{recipe_id}", token=token)
        if not isinstance(data, dict):
            return None
        return parse_recipe(data)

    async def create_recipe(self, token: str, payload: dict[str, object]) -> Recipe:
        """Create a recipe and return it."""
        data = await self.client.post(
            "/recipes", token=token, json=payload, default_error="create_recipe_failed"
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to create recipe")
        return parse_recipe(data)

    async def update_recipe(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> Recipe:
        """Update a recipe and return it."""
        data = await self.client.patch(
            f"/recipes/{recipe_id}",
            token=token,
            json=payload,
            default_error="update_recipe_failed",
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to update recipe")
        return parse_recipe(data)

    async def delete_recipe(self, token: str, recipe_id: str) -> None:
        """Delete a recipe."""
        await self.client.delete(
            f"/recipes/{recipe_id}", token=token, default_error="delete_recipe_failed"
        )

    async def add_ingredient(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> RecipeIngredient:
        """Add an ingredient line to a recipe."""
        data = await self.client.post(
            f"/recipes/{recipe_id}/ingredients",
            token=token,
            json=payload,
            default_error="add_ingredient_failed",
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to add ingredient")
        return parse_ingredient(data)

    async def update_ingredient(
        self,
        token: str,
        recipe_id: str,
        ingredient_id: str,
        payload: dict[str, object],
    ) -> RecipeIngredient:
        """Update an ingredient line."""
        data = await self.client.patch(
            f"/recipes/{recipe_id}/ingredients/{ingredient_id}",
            token=token,
            json=payload,
            default_error="update_ingredient_failed",
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to update ingredient")
        return parse_ingredient(data)

    async def delete_ingredient(
        self, token: str, recipe_id: str, ingredient_id: str
    ) -> None:
        """Remove an ingredient line."""
        await self.client.delete(
            f"/recipes/{recipe_id}/ingredients/{ingredient_id}",
            token=token,
            default_error="delete_ingredient_failed",
        )


def _recipe_rows(data: object) -> list[dict[str, object]]:
    """Accept ``[...]``, ``{"recipes": [...]}`` or ``{"items": [...]}``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for field in ("recipes", "items"):
            rows = data.get(field)
            if isinstance(rows, list):
                return rows
    return []


def parse_decimal(raw: object) -> Decimal:
    """Parse a decimal sent as a string, defaulting to zero."""
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return Decimal(0)


def parse_item(row: dict[str, object]) -> Item:
    """Parse an item row into a domain model."""
    tags = row.get("tags") or []
    return Item(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        unit=str(row.get("unit", "")),
        category=str(row.get("category", "")),
        tags=tuple(str(tag) for tag in tags),  # type: ignore[attr-defined]
        is_archived=bool(row.get("isArchived", False)),
    )


def parse_ingredient(row: dict[str, object]) -> RecipeIngredient:
    """Parse an ingredient row; the embedded item may be absent."""
    item_row = row.get("item")
    item = parse_item(item_row) if isinstance(item_row, dict) else None
    item_id = row.get("itemId") or (item.id if item else "")
    return RecipeIngredient(
        id=str(row["id"]),
        item_id=str(item_id),
        item=item,
        quantity=parse_decimal(row.get("quantity", "0")),
        unit_override=row.get("unitOverride") or None,  # type: ignore[arg-type]
    )


def parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    tags = row.get("tags") or []
    ingredients = row.get("ingredients") or []
    return Recipe(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        type=RecipeType(row.get("type", RecipeType.MEAL.value)),
        tags=tuple(str(tag) for tag in tags),  # type: ignore[attr-defined]
        notes=row.get("notes") or None,  # type: ignore[arg-type]
        text=row.get("text") or None,  # type: ignore[arg-type]
        ingredients=tuple(
            parse_ingredient(ingredient)
            for ingredient in ingredients  # type: ignore[attr-defined]
        ),
    )

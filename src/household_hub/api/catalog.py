"""Item catalog, recipe administration and recipe suggestion endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from household_hub.api.auth import require_token
from household_hub.api.models import (
    AddIngredientRequest,
    CreateItemRequest,
    CreateRecipeRequest,
    SuggestRequest,
    UpdateIngredientRequest,
    UpdateItemRequest,
    UpdateRecipeRequest,
)
from household_hub.domain.catalog import RecipeType

if TYPE_CHECKING:
    from household_hub.containers import AppContainer
    from household_hub.domain.catalog import Item, Recipe, RecipeIngredient
    from household_hub.domain.matching import MatchResult, RecipeSuggestion

router = APIRouter(tags=["catalog"])


@router.get("/items")
async def list_items(
    request: Request,
    q: str | None = None,
    category: str | None = None,
    archived: bool = False,
    token: str = Depends(require_token),
) -> list[dict[str, object]]:
    """Return catalog items matching the filters."""
    container: AppContainer = request.app.state.container
    items = await container.item_service.list_items(token, q, category, archived)
    return [serialize_item(item) for item in items]


@router.get("/items/grouped")
async def list_items_grouped(
    request: Request, token: str = Depends(require_token)
) -> dict[str, list[dict[str, object]]]:
    """Return active items grouped by category."""
    container: AppContainer = request.app.state.container
    grouped = await container.item_service.list_grouped(token)
    return {
        category: [serialize_item(item) for item in items]
        for category, items in grouped.items()
    }


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: CreateItemRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Create a catalog item."""
    container: AppContainer = request.app.state.container
    item = await container.item_service.create_item(
        token, payload.name, payload.category, payload.unit, payload.tags
    )
    return serialize_item(item)


@router.patch("/items/{item_id}")
async def update_item(
    item_id: str,
    payload: UpdateItemRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Patch a catalog item."""
    container: AppContainer = request.app.state.container
    item = await container.item_service.update_item(
        token, item_id, payload.model_dump(exclude_unset=True)
    )
    return serialize_item(item)


@router.delete("/items/{item_id}")
async def delete_item(
    item_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, str]:
    """Delete a catalog item."""
    container: AppContainer = request.app.state.container
    await container.item_service.delete_item(token, item_id)
    return {"status": "ok"}


@router.post("/recipes/suggest")
async def suggest_recipes(
    payload: SuggestRequest,
    request: Request,
    token: str = Depends(require_token),
) -> list[dict[str, object]]:
    """Return recipes ranked by how well the selected items cover them."""
    container: AppContainer = request.app.state.container
    suggestions = await container.suggestion_service.suggest(
        token,
        payload.items,
        recipe_type=payload.type,
        max_missing=payload.missing,
    )
    return [_serialize_suggestion(suggestion) for suggestion in suggestions]


@router.get("/recipes")
async def list_recipes(
    request: Request,
    q: str | None = None,
    type: RecipeType | None = None,  # noqa: A002
    token: str = Depends(require_token),
) -> list[dict[str, object]]:
    """Return recipes matching the filters."""
    container: AppContainer = request.app.state.container
    recipes = await container.recipe_service.list_recipes(token, q, type)
    return [serialize_recipe(recipe) for recipe in recipes]


@router.post("/recipes", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: CreateRecipeRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Create a recipe."""
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.create_recipe(
        token,
        payload.title,
        payload.type,
        tags=payload.tags,
        notes=payload.notes,
        text=payload.text,
    )
    return serialize_recipe(recipe)


@router.get("/recipes/{recipe_id}")
async def get_recipe(
    recipe_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, object]:
    """Return a recipe with its ingredient lines."""
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.get_recipe(token, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    return serialize_recipe(recipe)


@router.patch("/recipes/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    payload: UpdateRecipeRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Patch a recipe."""
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.update_recipe(
        token, recipe_id, payload.model_dump(exclude_unset=True)
    )
    return serialize_recipe(recipe)


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(
    recipe_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, str]:
    """Delete a recipe."""
    container: AppContainer = request.app.state.container
    await container.recipe_service.delete_recipe(token, recipe_id)
    return {"status": "ok"}


@router.post("/recipes/{recipe_id}/ingredients", status_code=status.HTTP_201_CREATED)
async def add_ingredient(
    recipe_id: str,
    payload: AddIngredientRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Add an ingredient line to a recipe."""
    container: AppContainer = request.app.state.container
    ingredient = await container.recipe_service.add_ingredient(
        token,
        recipe_id,
        payload.item_id,
        payload.quantity,
        unit_override=payload.unit_override,
    )
    return _serialize_ingredient(ingredient)


@router.patch("/recipes/{recipe_id}/ingredients/{ingredient_id}")
async def update_ingredient(
    recipe_id: str,
    ingredient_id: str,
    payload: UpdateIngredientRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Patch quantity or unit override of an ingredient line."""
    container: AppContainer = request.app.state.container
    ingredient = await container.recipe_service.update_ingredient(
        token,
        recipe_id,
        ingredient_id,
        payload.model_dump(exclude_unset=True),
    )
    return _serialize_ingredient(ingredient)


@router.delete("/recipes/{recipe_id}/ingredients/{ingredient_id}")
async def delete_ingredient(
    recipe_id: str,
    ingredient_id: str,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, str]:
    """Remove an ingredient line."""
    container: AppContainer = request.app.state.container
    await container.recipe_service.delete_ingredient(token, recipe_id, ingredient_id)
    return {"status": "ok"}


def serialize_item(item: Item) -> dict[str, object]:
    """Serialize a catalog item for the wire."""
    return {
        "id": item.id,
        "name": item.name,
        "unit": item.unit,
        "category": item.category,
        "tags": list(item.tags),
        "isArchived": item.is_archived,
    }


def _serialize_ingredient(ingredient: RecipeIngredient) -> dict[str, object]:
    return {
        "id": ingredient.id,
        "itemId": ingredient.item_id,
        "quantity": str(ingredient.quantity),
        "unitOverride": ingredient.unit_override,
        "displayUnit": ingredient.display_unit,
        "item": serialize_item(ingredient.item) if ingredient.item else None,
    }


def serialize_recipe(recipe: Recipe) -> dict[str, object]:
    """Serialize a recipe with its ingredient lines."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "type": recipe.type.value,
        "tags": list(recipe.tags),
        "notes": recipe.notes,
        "text": recipe.text,
        "ingredients": [_serialize_ingredient(line) for line in recipe.ingredients],
    }


def _serialize_match(match: MatchResult) -> dict[str, object]:
    return {
        "matched": match.matched,
        "total": match.total,
        "missing": match.missing,
        "matchPct": match.match_pct,
    }


def _serialize_suggestion(suggestion: RecipeSuggestion) -> dict[str, object]:
    return {
        **serialize_recipe(suggestion.recipe),
        "match": _serialize_match(suggestion.match),
    }

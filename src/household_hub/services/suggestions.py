"""Recipe suggestion based on the items a household has available."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from household_hub.domain.catalog import Item, Recipe, RecipeType
from household_hub.domain.matching import RecipeSuggestion, SuggestionQuery
from household_hub.services.catalog import CatalogStore
from household_hub.services.matching import rank, suggest

_logger = logging.getLogger(__name__)


@dataclass
class RecipeSuggestionService:
    """Fetches a catalog snapshot and runs the matching engine on it.

    Results are computed per request and never cached.
    """

    catalog: CatalogStore
    debug: bool = False

    async def suggest(
        self,
        token: str,
        item_ids: Iterable[str],
        recipe_type: RecipeType | None = None,
        max_missing: int | None = None,
    ) -> list[RecipeSuggestion]:
        """Return ranked recipes for the selected items."""
        query = SuggestionQuery(
            available_item_ids=frozenset(item_ids),
            type=recipe_type,
            max_missing=max_missing,
        )
        recipes = await self.catalog.get_recipes(token, recipe_type)
        items = await self.catalog.get_items(token)
        resolved = resolve_ingredients(recipes, items)
        ranked = rank(suggest(resolved, query))
        _logger.info(
            "Recipe suggestions: items=%s recipes=%s results=%s",
            len(query.available_item_ids),
            len(recipes),
            len(ranked),
        )
        if self.debug:
            for suggestion in ranked:
                _logger.info(
                    "Suggestion %s: %s/%s matched",
                    suggestion.recipe.title,
                    suggestion.match.matched,
                    suggestion.match.total,
                )
        return ranked


def resolve_ingredients(
    recipes: Iterable[Recipe], items: Iterable[Item]
) -> list[Recipe]:
    """Point every ingredient line at the current catalog item.

    Lines referencing an item missing from the catalog get ``item=None``.
    """
    by_id = {item.id: item for item in items}
    return [
        replace(
            recipe,
            ingredients=tuple(
                replace(ingredient, item=by_id.get(ingredient.item_id))
                for ingredient in recipe.ingredients
            ),
        )
        for recipe in recipes
    ]

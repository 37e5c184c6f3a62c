"""Recipe matching engine: coverage evaluation, filtering and ranking."""

from collections.abc import Iterable, Sequence, Set

from household_hub.domain.catalog import Recipe
from household_hub.domain.matching import MatchResult, RecipeSuggestion, SuggestionQuery

DEFAULT_MAX_MISSING = 0


def evaluate(recipe: Recipe, available_item_ids: Set[str]) -> MatchResult:
    """Compute how many ingredient lines of a recipe are covered.

    Every line counts on its own, so duplicate item references are counted
    once per line. Lines whose item no longer resolves are never matched.
    """
    total = len(recipe.ingredients)
    matched = sum(
        1
        for ingredient in recipe.ingredients
        if ingredient.item is not None and ingredient.item.id in available_item_ids
    )
    match_pct = 0.0 if total == 0 else 100.0 * matched / total
    return MatchResult(
        matched=matched,
        total=total,
        missing=total - matched,
        match_pct=match_pct,
    )


def suggest(
    recipes: Iterable[Recipe], query: SuggestionQuery
) -> list[RecipeSuggestion]:
    """Return recipes within the missing-ingredient threshold, unranked."""
    threshold = (
        DEFAULT_MAX_MISSING if query.max_missing is None else query.max_missing
    )
    suggestions: list[RecipeSuggestion] = []
    for recipe in recipes:
        if query.type is not None and recipe.type != query.type:
            continue
        match = evaluate(recipe, query.available_item_ids)
        if match.missing <= threshold:
            suggestions.append(RecipeSuggestion(recipe=recipe, match=match))
    return suggestions


def rank(pairs: Sequence[RecipeSuggestion]) -> list[RecipeSuggestion]:
    """Order suggestions by coverage, then fewest missing, then title."""
    return sorted(
        pairs,
        key=lambda pair: (
            -pair.match.match_pct,
            pair.match.missing,
            pair.recipe.title.casefold(),
        ),
    )

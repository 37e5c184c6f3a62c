"""Domain models for recipe suggestion."""

from dataclasses import dataclass

from household_hub.domain.catalog import Recipe, RecipeType


@dataclass(frozen=True)
class MatchResult:
    """Ingredient coverage of a recipe for a set of available items."""

    matched: int
    total: int
    missing: int
    match_pct: float


@dataclass(frozen=True)
class SuggestionQuery:
    """Input of a suggestion request."""

    available_item_ids: frozenset[str]
    type: RecipeType | None = None
    max_missing: int | None = None

    def __post_init__(self) -> None:
        if self.max_missing is not None and self.max_missing < 0:
            raise ValueError("max_missing must be non-negative")


@dataclass(frozen=True)
class RecipeSuggestion:
    """Recipe paired with its match result."""

    recipe: Recipe
    match: MatchResult

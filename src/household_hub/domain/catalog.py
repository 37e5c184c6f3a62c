"""Domain models for the global item catalog and recipes."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class ItemCategory(Enum):
    """Closed set of item categories offered by the catalog."""

    KITCHEN = "kitchen"
    PANTRY = "pantry"
    FRIDGE = "fridge"
    FREEZER = "freezer"
    CLEANING = "cleaning"
    BATHROOM = "bathroom"
    LAUNDRY = "laundry"
    OTHER = "other"


class Unit(Enum):
    """Closed set of base units for catalog items."""

    PIECES = "pcs"
    GRAMS = "g"
    KILOGRAMS = "kg"
    MILLILITRES = "ml"
    LITRES = "L"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"
    PACK = "pack"
    BOX = "box"


class RecipeType(Enum):
    """Kinds of recipes."""

    MEAL = "MEAL"
    DESSERT = "DESSERT"


@dataclass(frozen=True)
class Item:
    """Catalog item referenced by recipes and shopping lists."""

    id: str
    name: str
    unit: str
    category: str
    tags: tuple[str, ...] = ()
    is_archived: bool = False


@dataclass(frozen=True)
class RecipeIngredient:
    """Single ingredient line of a recipe.

    ``item`` is ``None`` when ``item_id`` no longer resolves against the
    catalog; such a line can never be matched.
    """

    id: str
    item_id: str
    item: Item | None
    quantity: Decimal
    unit_override: str | None = None

    @property
    def display_unit(self) -> str:
        """Unit shown next to the quantity."""
        if self.unit_override:
            return self.unit_override
        if self.item is not None:
            return self.item.unit
        return ""


@dataclass(frozen=True)
class Recipe:
    """Recipe with its ordered ingredient lines."""

    id: str
    title: str
    type: RecipeType
    tags: tuple[str, ...] = ()
    notes: str | None = None
    text: str | None = None
    ingredients: tuple[RecipeIngredient, ...] = field(default_factory=tuple)

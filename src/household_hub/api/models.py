"""Pydantic models for request payloads."""

from pydantic import BaseModel, ConfigDict, Field

from household_hub.domain.catalog import ItemCategory, RecipeType, Unit
from household_hub.domain.chores import ChoreFrequency


class CamelModel(BaseModel):
    """Base model accepting camelCase aliases or field names."""

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str
    password: str = Field(min_length=1)


class SignupRequest(CamelModel):
    """Account registration payload."""

    display_name: str = Field(alias="displayName", min_length=1)
    email: str
    password: str = Field(min_length=6)


class CreateHouseRequest(CamelModel):
    """House creation payload."""

    name: str = Field(min_length=1)


class JoinHouseRequest(CamelModel):
    """House join payload."""

    house_id: str = Field(alias="houseId", min_length=1)


class CreateItemRequest(CamelModel):
    """Catalog item creation payload."""

    name: str
    category: ItemCategory = ItemCategory.KITCHEN
    unit: Unit = Unit.PIECES
    tags: list[str] | str | None = None


class UpdateItemRequest(CamelModel):
    """Partial update of a catalog item."""

    name: str | None = None
    category: ItemCategory | None = None
    unit: Unit | None = None
    tags: list[str] | str | None = None


class CreateRecipeRequest(CamelModel):
    """Recipe creation payload."""

    title: str
    type: RecipeType = RecipeType.MEAL
    tags: list[str] | str | None = None
    notes: str | None = None
    text: str | None = None


class UpdateRecipeRequest(CamelModel):
    """Partial update of a recipe."""

    title: str | None = None
    type: RecipeType | None = None
    tags: list[str] | str | None = None
    notes: str | None = None
    text: str | None = None


class AddIngredientRequest(CamelModel):
    """Ingredient line creation payload."""

    item_id: str = Field(alias="itemId")
    quantity: str | float = 1
    unit_override: str | None = Field(default=None, alias="unitOverride")


class UpdateIngredientRequest(CamelModel):
    """Partial update of an ingredient line."""

    quantity: str | float | None = None
    unit_override: str | None = Field(default=None, alias="unitOverride")


class SuggestRequest(CamelModel):
    """Recipe suggestion query."""

    items: list[str] = Field(default_factory=list)
    type: RecipeType | None = None
    missing: int | None = Field(default=None, ge=0)


class CreateChoreRequest(CamelModel):
    """Chore creation payload."""

    title: str
    frequency: ChoreFrequency = ChoreFrequency.WEEKLY
    assigned_to_id: str | None = Field(default=None, alias="assignedToId")


class ReassignChoreRequest(CamelModel):
    """Chore reassignment payload; ``null`` unassigns."""

    assigned_to_id: str | None = Field(default=None, alias="assignedToId")


class CreateListRequest(CamelModel):
    """Shopping list creation payload."""

    title: str


class AddLineRequest(CamelModel):
    """Shopping list line payload."""

    item_id: str = Field(alias="itemId")
    quantity: str | float = 1

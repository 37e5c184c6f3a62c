"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from household_hub.adapters.api_client import BackendError
from household_hub.config import Settings
from household_hub.containers import AppContainer
from household_hub.domain.catalog import Item, Recipe, RecipeIngredient, RecipeType
from household_hub.domain.chores import Chore, ChoreFrequency
from household_hub.domain.models import AuthSession, House, Member, Profile, UserRecord
from household_hub.domain.shopping import (
    ShoppingList,
    ShoppingListDetail,
    ShoppingListLine,
)
from household_hub.services.auth import AuthRepository, AuthService
from household_hub.services.cache import QueryCache
from household_hub.services.catalog import (
    CatalogStore,
    ItemRepository,
    ItemService,
    RecipeRepository,
    RecipeService,
)
from household_hub.services.chores import ChoreRepository, ChoreService
from household_hub.services.houses import HouseRepository, HouseService
from household_hub.services.shopping import ShoppingRepository, ShoppingService
from household_hub.services.suggestions import RecipeSuggestionService

TOKEN = "test-token"


def make_item(name: str, unit: str = "pcs", category: str = "pantry") -> Item:
    return Item(id=f"item-{name.lower()}", name=name, unit=unit, category=category)


def make_recipe(
    title: str,
    items: list[Item],
    recipe_type: RecipeType = RecipeType.MEAL,
) -> Recipe:
    return Recipe(
        id=f"recipe-{title.lower().replace(' ', '-')}",
        title=title,
        type=recipe_type,
        ingredients=tuple(
            RecipeIngredient(
                id=str(uuid4()),
                item_id=item.id,
                item=item,
                quantity=Decimal(1),
            )
            for item in items
        ),
    )


@dataclass
class InMemoryCatalogRepository(CatalogStore, ItemRepository, RecipeRepository):
    """In-memory catalog repository for tests."""

    items: dict[str, Item] = field(default_factory=dict)
    recipes: dict[str, Recipe] = field(default_factory=dict)
    list_calls: int = 0
    last_payload: dict[str, object] | None = None

    async def get_recipes(
        self, token: str, recipe_type: RecipeType | None = None
    ) -> list[Recipe]:
        return [
            recipe
            for recipe in self.recipes.values()
            if recipe_type is None or recipe.type == recipe_type
        ]

    async def get_items(self, token: str) -> list[Item]:
        return list(self.items.values())

    async def list_items(
        self, token: str, query: str | None, category: str | None, archived: bool
    ) -> list[Item]:
        self.list_calls += 1
        return [
            item
            for item in self.items.values()
            if (query is None or query.lower() in item.name.lower())
            and (category is None or item.category == category)
            and (archived or not item.is_archived)
        ]

    async def create_item(self, token: str, payload: dict[str, object]) -> Item:
        self.last_payload = payload
        item = Item(
            id=str(uuid4()),
            name=str(payload["name"]),
            unit=str(payload["unit"]),
            category=str(payload["category"]),
            tags=tuple(payload.get("tags", [])),  # type: ignore[arg-type]
        )
        self.items[item.id] = item
        return item

    async def update_item(
        self, token: str, item_id: str, payload: dict[str, object]
    ) -> Item:
        self.last_payload = payload
        current = self.items[item_id]
        updated = replace(
            current,
            name=str(payload.get("name", current.name)),
            unit=str(payload.get("unit", current.unit)),
            category=str(payload.get("category", current.category)),
        )
        self.items[item_id] = updated
        return updated

    async def delete_item(self, token: str, item_id: str) -> None:
        self.items.pop(item_id, None)

    async def list_recipes(
        self, token: str, query: str | None, recipe_type: RecipeType | None
    ) -> list[Recipe]:
        self.list_calls += 1
        return [
            recipe
            for recipe in await self.get_recipes(token, recipe_type)
            if query is None or query.lower() in recipe.title.lower()
        ]

    async def get_recipe(self, token: str, recipe_id: str) -> Recipe | None:
        return self.recipes.get(recipe_id)

    async def create_recipe(self, token: str, payload: dict[str, object]) -> Recipe:
        self.last_payload = payload
        recipe = Recipe(
            id=str(uuid4()),
            title=str(payload["title"]),
            type=RecipeType(payload["type"]),
            tags=tuple(payload.get("tags", [])),  # type: ignore[arg-type]
            notes=payload.get("notes"),  # type: ignore[arg-type]
            text=payload.get("text"),  # type: ignore[arg-type]
        )
        self.recipes[recipe.id] = recipe
        return recipe

    async def update_recipe(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> Recipe:
        self.last_payload = payload
        current = self.recipes[recipe_id]
        updated = replace(
            current,
            title=str(payload.get("title", current.title)),
            notes=payload.get("notes", current.notes),  # type: ignore[arg-type]
        )
        self.recipes[recipe_id] = updated
        return updated

    async def delete_recipe(self, token: str, recipe_id: str) -> None:
        self.recipes.pop(recipe_id, None)

    async def add_ingredient(
        self, token: str, recipe_id: str, payload: dict[str, object]
    ) -> RecipeIngredient:
        self.last_payload = payload
        item_id = str(payload["itemId"])
        ingredient = RecipeIngredient(
            id=str(uuid4()),
            item_id=item_id,
            item=self.items.get(item_id),
            quantity=Decimal(str(payload["quantity"])),
            unit_override=payload.get("unitOverride"),  # type: ignore[arg-type]
        )
        recipe = self.recipes[recipe_id]
        self.recipes[recipe_id] = replace(
            recipe, ingredients=(*recipe.ingredients, ingredient)
        )
        return ingredient

    async def update_ingredient(
        self,
        token: str,
        recipe_id: str,
        ingredient_id: str,
        payload: dict[str, object],
    ) -> RecipeIngredient:
        self.last_payload = payload
        recipe = self.recipes[recipe_id]
        current = next(line for line in recipe.ingredients if line.id == ingredient_id)
        updated = replace(
            current,
            quantity=Decimal(str(payload.get("quantity", current.quantity))),
            unit_override=payload.get(  # type: ignore[arg-type]
                "unitOverride", current.unit_override
            ),
        )
        self.recipes[recipe_id] = replace(
            recipe,
            ingredients=tuple(
                updated if line.id == ingredient_id else line
                for line in recipe.ingredients
            ),
        )
        return updated

    async def delete_ingredient(
        self, token: str, recipe_id: str, ingredient_id: str
    ) -> None:
        recipe = self.recipes[recipe_id]
        self.recipes[recipe_id] = replace(
            recipe,
            ingredients=tuple(
                line for line in recipe.ingredients if line.id != ingredient_id
            ),
        )


@dataclass
class InMemoryChoreRepository(ChoreRepository):
    """In-memory chore repository for tests."""

    chores: dict[str, Chore] = field(default_factory=dict)
    fail_reassign: bool = False
    list_calls: int = 0

    def add(
        self,
        title: str,
        updated_at: datetime,
        is_archived: bool = False,
        assigned_to_id: str | None = None,
    ) -> Chore:
        chore = Chore(
            id=str(uuid4()),
            title=title,
            frequency=ChoreFrequency.WEEKLY,
            assigned_to_id=assigned_to_id,
            assigned_to_name=None,
            is_archived=is_archived,
            updated_at=updated_at,
        )
        self.chores[chore.id] = chore
        return chore

    async def list_chores(self, token: str, archived: bool) -> list[Chore]:
        self.list_calls += 1
        return [
            chore
            for chore in self.chores.values()
            if archived or not chore.is_archived
        ]

    async def create_chore(self, token: str, payload: dict[str, object]) -> Chore:
        chore = Chore(
            id=str(uuid4()),
            title=str(payload["title"]),
            frequency=ChoreFrequency(payload["frequency"]),
            assigned_to_id=payload.get("assignedToId"),  # type: ignore[arg-type]
            assigned_to_name=None,
            is_archived=False,
            updated_at=datetime.now(tz=UTC),
        )
        self.chores[chore.id] = chore
        return chore

    async def archive_chore(self, token: str, chore_id: str) -> Chore | None:
        chore = replace(self.chores[chore_id], is_archived=True)
        self.chores[chore_id] = chore
        return chore

    async def reassign_chore(
        self, token: str, chore_id: str, assigned_to_id: str | None
    ) -> Chore | None:
        if self.fail_reassign:
            raise BackendError(403, "assign_failed")
        chore = replace(
            self.chores[chore_id],
            assigned_to_id=assigned_to_id,
            assigned_to_name="Sam" if assigned_to_id else None,
        )
        self.chores[chore_id] = chore
        return chore


@dataclass
class InMemoryShoppingRepository(ShoppingRepository):
    """In-memory shopping list repository for tests."""

    lists: dict[str, ShoppingListDetail] = field(default_factory=dict)
    archived: set[str] = field(default_factory=set)
    fail_remove: bool = False

    async def list_lists(self, token: str) -> list[ShoppingList]:
        return [
            ShoppingList(
                id=detail.id,
                title=detail.title,
                is_archived=False,
                updated_at=None,
                item_count=len(detail.lines),
            )
            for detail in self.lists.values()
            if detail.id not in self.archived
        ]

    async def get_list(self, token: str, list_id: str) -> ShoppingListDetail | None:
        return self.lists.get(list_id)

    async def create_list(self, token: str, title: str) -> ShoppingList:
        detail = ShoppingListDetail(id=str(uuid4()), title=title, lines=())
        self.lists[detail.id] = detail
        return ShoppingList(
            id=detail.id, title=title, is_archived=False, updated_at=None, item_count=0
        )

    async def add_line(
        self, token: str, list_id: str, payload: dict[str, object]
    ) -> None:
        detail = self.lists[list_id]
        line = ShoppingListLine(
            id=str(uuid4()),
            list_id=list_id,
            item_id=str(payload["itemId"]),
            quantity=Decimal(str(payload["quantity"])),
            item=None,
        )
        self.lists[list_id] = replace(detail, lines=(*detail.lines, line))

    async def remove_line(self, token: str, list_id: str, line_id: str) -> None:
        if self.fail_remove:
            raise BackendError(500, "remove_line_failed")
        detail = self.lists[list_id]
        self.lists[list_id] = replace(
            detail, lines=tuple(line for line in detail.lines if line.id != line_id)
        )

    async def archive_list(self, token: str, list_id: str) -> None:
        self.archived.add(list_id)


@dataclass
class InMemoryAuthRepository(AuthRepository):
    """In-memory auth repository accepting a single account."""

    user: UserRecord = field(
        default_factory=lambda: UserRecord(
            id="user-1", email="sam@example.com", display_name="Sam", house_id="h-1"
        )
    )
    password: str = "secret"
    house: House | None = field(default_factory=lambda: House(id="h-1", name="Home"))

    async def login(self, email: str, password: str) -> AuthSession:
        if email != self.user.email or password != self.password:
            raise BackendError(401, "invalid_credentials")
        return AuthSession(token=TOKEN, user=self.user)

    async def signup(
        self, display_name: str, email: str, password: str
    ) -> AuthSession | None:
        return AuthSession(
            token=TOKEN,
            user=UserRecord(id="user-2", email=email, display_name=display_name),
        )

    async def me(self, token: str) -> Profile:
        if token != TOKEN:
            raise BackendError(401, "unauthorized")
        return Profile(user=self.user, house=self.house)


@dataclass
class InMemoryHouseRepository(HouseRepository):
    """In-memory house repository for tests."""

    members: list[Member] = field(
        default_factory=lambda: [
            Member(id="user-1", display_name="Sam", email="sam@example.com")
        ]
    )
    joined: list[str] = field(default_factory=list)

    async def create_house(self, token: str, name: str) -> House | None:
        return House(id="h-new", name=name)

    async def join_house(self, token: str, house_id: str) -> House | None:
        self.joined.append(house_id)
        return House(id=house_id, name="Joined")

    async def leave_house(self, token: str) -> None:
        self.joined.clear()

    async def list_members(self, token: str) -> list[Member]:
        return self.members


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="https://backend.test")


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def chore_repository() -> InMemoryChoreRepository:
    return InMemoryChoreRepository()


@pytest.fixture
def shopping_repository() -> InMemoryShoppingRepository:
    return InMemoryShoppingRepository()


@pytest.fixture
def container(
    settings: Settings,
    catalog_repository: InMemoryCatalogRepository,
    chore_repository: InMemoryChoreRepository,
    shopping_repository: InMemoryShoppingRepository,
) -> AppContainer:
    cache = QueryCache(ttl_seconds=settings.query_cache_ttl_seconds)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cache=cache,
        auth_service=AuthService(InMemoryAuthRepository()),
        house_service=HouseService(InMemoryHouseRepository(), cache),
        item_service=ItemService(catalog_repository, cache),
        recipe_service=RecipeService(catalog_repository, cache),
        suggestion_service=RecipeSuggestionService(catalog=catalog_repository),
        chore_service=ChoreService(chore_repository, cache),
        shopping_service=ShoppingService(shopping_repository, cache),
        close_resources=close_resources,
    )

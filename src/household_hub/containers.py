"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from household_hub.adapters.api_auth_repository import (
    ApiAuthRepository,
    ApiHouseRepository,
)
from household_hub.adapters.api_catalog_repository import ApiCatalogRepository
from household_hub.adapters.api_chore_repository import ApiChoreRepository
from household_hub.adapters.api_client import HttpxApiClient
from household_hub.adapters.api_shopping_repository import ApiShoppingRepository
from household_hub.config import Settings
from household_hub.services.auth import AuthService
from household_hub.services.cache import QueryCache
from household_hub.services.catalog import ItemService, RecipeService
from household_hub.services.chores import ChoreService
from household_hub.services.houses import HouseService
from household_hub.services.shopping import ShoppingService
from household_hub.services.suggestions import RecipeSuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: QueryCache
    auth_service: AuthService
    house_service: HouseService
    item_service: ItemService
    recipe_service: RecipeService
    suggestion_service: RecipeSuggestionService
    chore_service: ChoreService
    shopping_service: ShoppingService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_client = HttpxApiClient.create(
        base_url=resolved_settings.api_base_url,
        timeout_seconds=resolved_settings.api_timeout_seconds,
        retry_attempts=resolved_settings.retry_attempts,
        retry_delay_seconds=resolved_settings.retry_delay_seconds,
    )
    cache = QueryCache(ttl_seconds=resolved_settings.query_cache_ttl_seconds)
    catalog_repository = ApiCatalogRepository(api_client)

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        auth_service=AuthService(ApiAuthRepository(api_client)),
        house_service=HouseService(ApiHouseRepository(api_client), cache),
        item_service=ItemService(catalog_repository, cache),
        recipe_service=RecipeService(catalog_repository, cache),
        suggestion_service=RecipeSuggestionService(
            catalog=catalog_repository, debug=resolved_settings.debug
        ),
        chore_service=ChoreService(ApiChoreRepository(api_client), cache),
        shopping_service=ShoppingService(ApiShoppingRepository(api_client), cache),
        close_resources=close_resources,
    )

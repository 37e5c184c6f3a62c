"""House membership."""

from dataclasses import dataclass
from typing import Protocol

from household_hub.domain.models import House, Member
from household_hub.services.cache import QueryCache, scoped_key


class HouseRepository(Protocol):
    """Interface for the backend's house endpoints."""

    async def create_house(self, token: str, name: str) -> House | None:
        """Create a house and join it."""

    async def join_house(self, token: str, house_id: str) -> House | None:
        """Join an existing house."""

    async def leave_house(self, token: str) -> None:
        """Leave the current house."""

    async def list_members(self, token: str) -> list[Member]:
        """Return members of the current house."""


@dataclass
class HouseService:
    """Application service for house membership."""

    repository: HouseRepository
    cache: QueryCache

    async def create_house(self, token: str, name: str) -> House | None:
        """Create a house."""
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("name_required")
        house = await self.repository.create_house(token, cleaned)
        self._reset(token)
        return house

    async def join_house(self, token: str, house_id: str) -> House | None:
        """Join a house by id."""
        cleaned = house_id.strip()
        if not cleaned:
            raise ValueError("house_id_required")
        house = await self.repository.join_house(token, cleaned)
        self._reset(token)
        return house

    async def leave_house(self, token: str) -> None:
        """Leave the current house."""
        await self.repository.leave_house(token)
        self._reset(token)

    async def list_members(self, token: str) -> list[Member]:
        """Return possible chore assignees."""
        members = await self.cache.fetch(
            scoped_key(token, "members"), lambda: self.repository.list_members(token)
        )
        return list(members)

    def _reset(self, token: str) -> None:
        # Every cached view is house-scoped.
        self.cache.invalidate(scoped_key(token))

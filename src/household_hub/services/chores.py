"""Chore management for the current house."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from household_hub.domain.chores import Chore, ChoreFrequency
from household_hub.services.cache import PendingMutation, QueryCache, scoped_key

_logger = logging.getLogger(__name__)


class ChoreRepository(Protocol):
    """Persistence interface for chores."""

    async def list_chores(self, token: str, archived: bool) -> list[Chore]:
        """Return chores, including archived ones when requested."""

    async def create_chore(self, token: str, payload: dict[str, object]) -> Chore:
        """Create a chore and return it."""

    async def archive_chore(self, token: str, chore_id: str) -> Chore | None:
        """Archive a chore, marking it complete."""

    async def reassign_chore(
        self, token: str, chore_id: str, assigned_to_id: str | None
    ) -> Chore | None:
        """Change the assignee of a chore."""


def sort_chores(chores: Iterable[Chore]) -> list[Chore]:
    """Sort active chores first, then most recently updated first."""
    by_recency = sorted(chores, key=lambda chore: chore.updated_at, reverse=True)
    return sorted(by_recency, key=lambda chore: chore.is_archived)


def filter_chores(chores: Iterable[Chore], search: str | None) -> list[Chore]:
    """Keep chores whose title contains the search text."""
    needle = (search or "").strip().casefold()
    return [chore for chore in chores if needle in chore.title.casefold()]


@dataclass
class ChoreService:
    """Application service for chores with optimistic reassignment."""

    repository: ChoreRepository
    cache: QueryCache

    async def list_chores(
        self, token: str, archived: bool = False, search: str | None = None
    ) -> list[Chore]:
        """List chores filtered by title and sorted for display."""
        chores = await self.cache.fetch(
            self._key(token, archived),
            lambda: self.repository.list_chores(token, archived),
        )
        return sort_chores(filter_chores(chores, search))

    async def create_chore(
        self,
        token: str,
        title: str,
        frequency: ChoreFrequency,
        assigned_to_id: str | None = None,
    ) -> Chore:
        """Create a chore."""
        cleaned = title.strip()
        if not cleaned:
            raise ValueError("title_required")
        chore = await self.repository.create_chore(
            token,
            {
                "title": cleaned,
                "frequency": frequency.value,
                "assignedToId": assigned_to_id or None,
            },
        )
        self.cache.invalidate(scoped_key(token, "chores"))
        return chore

    async def complete_chore(self, token: str, chore_id: str) -> Chore | None:
        """Complete a chore by archiving it."""
        chore = await self.repository.archive_chore(token, chore_id)
        self.cache.invalidate(scoped_key(token, "chores"))
        return chore

    async def reassign_chore(
        self, token: str, chore_id: str, assigned_to_id: str | None
    ) -> Chore | None:
        """Reassign a chore, patching cached lists until the backend answers.

        The cached assignee id is swapped immediately; the display name is
        refreshed from the backend once the change is acknowledged.
        """
        now = datetime.now(tz=UTC)

        def patch(chores: object) -> list[Chore]:
            return [
                replace(
                    chore,
                    assigned_to_id=assigned_to_id,
                    assigned_to_name=None,
                    updated_at=now,
                )
                if chore.id == chore_id
                else chore
                for chore in chores  # type: ignore[attr-defined]
            ]

        pending: list[PendingMutation] = []
        for archived in (False, True):
            mutation = self.cache.apply_optimistic(self._key(token, archived), patch)
            if mutation is not None:
                pending.append(mutation)
        try:
            chore = await self.repository.reassign_chore(
                token, chore_id, assigned_to_id
            )
        except Exception:
            _logger.warning("Reassign of chore %s failed, rolling back", chore_id)
            for mutation in pending:
                self.cache.rollback(mutation)
            raise
        for mutation in pending:
            self.cache.confirm(mutation)
        return chore

    @staticmethod
    def _key(token: str, archived: bool) -> str:
        return scoped_key(token, "chores", "archived" if archived else "active")

"""Backend implementation of the chore repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from household_hub.adapters.api_client import ApiClient
from household_hub.domain.chores import Chore, ChoreFrequency
from household_hub.services.chores import ChoreRepository


@dataclass
class ApiChoreRepository(ChoreRepository):
    """REST-backed chore repository."""

    client: ApiClient

    async def list_chores(self, token: str, archived: bool) -> list[Chore]:
        """Return chores, including archived ones when requested."""
        params = {"archived": "true"} if archived else None
        data = await self.client.get("/chores", token=token, params=params)
        if not isinstance(data, list):
            return []
        return [_parse_chore(row) for row in data]

    async def create_chore(self, token: str, payload: dict[str, object]) -> Chore:
        """Create a chore and return it."""
        data = await self.client.post(
            "/chores", token=token, json=payload, default_error="create_chore_failed"
        )
        if not isinstance(data, dict):
            raise RuntimeError("Failed to create chore")
        return _parse_chore(data)

    async def archive_chore(self, token: str, chore_id: str) -> Chore | None:
        """Archive a chore."""
        data = await self.client.post(
            f"/chores/{chore_id}/archive",
            token=token,
            default_error="complete_chore_failed",
        )
        return _parse_chore(data) if isinstance(data, dict) else None

    async def reassign_chore(
        self, token: str, chore_id: str, assigned_to_id: str | None
    ) -> Chore | None:
        """Change the assignee of a chore."""
        data = await self.client.patch(
            f"/chores/{chore_id}/reassign",
            token=token,
            json={"assignedToId": assigned_to_id},
            default_error="assign_failed",
        )
        return _parse_chore(data) if isinstance(data, dict) else None


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp, assuming UTC when no offset is given."""
    if not isinstance(raw, str) or not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_chore(row: dict[str, object]) -> Chore:
    """Parse a chore row into a domain model."""
    assigned_to = row.get("assignedTo")
    assigned_to_name = (
        assigned_to.get("displayName") if isinstance(assigned_to, dict) else None
    )
    return Chore(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        frequency=ChoreFrequency(row.get("frequency", ChoreFrequency.WEEKLY.value)),
        assigned_to_id=row.get("assignedToId") or None,  # type: ignore[arg-type]
        assigned_to_name=assigned_to_name,
        is_archived=bool(row.get("isArchived", False)),
        updated_at=parse_timestamp(row.get("updatedAt"))
        or datetime.min.replace(tzinfo=UTC),
    )

"""Chore endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from household_hub.api.auth import require_token
from household_hub.api.models import CreateChoreRequest, ReassignChoreRequest

if TYPE_CHECKING:
    from household_hub.containers import AppContainer
    from household_hub.domain.chores import Chore

router = APIRouter(prefix="/chores", tags=["chores"])


@router.get("")
async def list_chores(
    request: Request,
    archived: bool = False,
    search: str | None = None,
    token: str = Depends(require_token),
) -> list[dict[str, object]]:
    """Return chores, active first and newest first."""
    container: AppContainer = request.app.state.container
    chores = await container.chore_service.list_chores(token, archived, search)
    return [_serialize_chore(chore) for chore in chores]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_chore(
    payload: CreateChoreRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Create a chore."""
    container: AppContainer = request.app.state.container
    chore = await container.chore_service.create_chore(
        token, payload.title, payload.frequency, payload.assigned_to_id
    )
    return _serialize_chore(chore)


@router.post("/{chore_id}/archive")
async def complete_chore(
    chore_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, object]:
    """Complete a chore by archiving it."""
    container: AppContainer = request.app.state.container
    chore = await container.chore_service.complete_chore(token, chore_id)
    return {"chore": _serialize_chore(chore) if chore else None}


@router.patch("/{chore_id}/reassign")
async def reassign_chore(
    chore_id: str,
    payload: ReassignChoreRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Reassign a chore to another member, or unassign it."""
    container: AppContainer = request.app.state.container
    chore = await container.chore_service.reassign_chore(
        token, chore_id, payload.assigned_to_id
    )
    return {"chore": _serialize_chore(chore) if chore else None}


def _serialize_chore(chore: Chore) -> dict[str, object]:
    return {
        "id": chore.id,
        "title": chore.title,
        "frequency": chore.frequency.value,
        "assignedToId": chore.assigned_to_id,
        "assignedTo": (
            {"id": chore.assigned_to_id, "displayName": chore.assigned_to_name}
            if chore.assigned_to_id
            else None
        ),
        "isArchived": chore.is_archived,
        "updatedAt": chore.updated_at.isoformat(),
    }

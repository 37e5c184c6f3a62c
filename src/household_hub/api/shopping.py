"""Shopping list endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from household_hub.api.auth import require_token
from household_hub.api.catalog import serialize_item
from household_hub.api.models import AddLineRequest, CreateListRequest

if TYPE_CHECKING:
    from household_hub.containers import AppContainer
    from household_hub.domain.shopping import (
        ShoppingList,
        ShoppingListDetail,
        ShoppingListLine,
    )

router = APIRouter(prefix="/shopping-lists", tags=["shopping"])


@router.get("")
async def list_lists(
    request: Request, token: str = Depends(require_token)
) -> list[dict[str, object]]:
    """Return the house's shopping lists."""
    container: AppContainer = request.app.state.container
    lists = await container.shopping_service.list_lists(token)
    return [_serialize_list(shopping_list) for shopping_list in lists]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_list(
    payload: CreateListRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Create a shopping list."""
    container: AppContainer = request.app.state.container
    created = await container.shopping_service.create_list(token, payload.title)
    return _serialize_list(created)


@router.get("/{list_id}")
async def get_list(
    list_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, object]:
    """Return a list with its lines."""
    container: AppContainer = request.app.state.container
    detail = await container.shopping_service.get_list(token, list_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    return _serialize_detail(detail)


@router.post("/{list_id}/items", status_code=status.HTTP_201_CREATED)
async def add_line(
    list_id: str,
    payload: AddLineRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Add an item to a list."""
    container: AppContainer = request.app.state.container
    detail = await container.shopping_service.add_line(
        token, list_id, payload.item_id, payload.quantity
    )
    return {"list": _serialize_detail(detail) if detail else None}


@router.delete("/{list_id}/items/{line_id}")
async def remove_line(
    list_id: str, line_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, str]:
    """Remove a line from a list."""
    container: AppContainer = request.app.state.container
    await container.shopping_service.remove_line(token, list_id, line_id)
    return {"status": "ok"}


@router.post("/{list_id}/archive")
async def archive_list(
    list_id: str, request: Request, token: str = Depends(require_token)
) -> dict[str, str]:
    """Archive a list."""
    container: AppContainer = request.app.state.container
    await container.shopping_service.archive_list(token, list_id)
    return {"status": "ok"}


def _serialize_list(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "id": shopping_list.id,
        "title": shopping_list.title,
        "isArchived": shopping_list.is_archived,
        "updatedAt": shopping_list.updated_at.isoformat()
        if shopping_list.updated_at
        else None,
        "itemCount": shopping_list.item_count,
    }


def _serialize_line(line: ShoppingListLine) -> dict[str, object]:
    return {
        "id": line.id,
        "listId": line.list_id,
        "itemId": line.item_id,
        "quantity": str(line.quantity),
        "unitOverride": line.unit_override,
        "displayUnit": line.display_unit,
        "note": line.note,
        "item": serialize_item(line.item) if line.item else None,
    }


def _serialize_detail(detail: ShoppingListDetail) -> dict[str, object]:
    return {
        "id": detail.id,
        "title": detail.title,
        "items": [_serialize_line(line) for line in detail.lines],
    }

"""Auth and house endpoints, plus the bearer token dependency."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from household_hub.api.models import (
    CreateHouseRequest,
    JoinHouseRequest,
    LoginRequest,
    SignupRequest,
)

if TYPE_CHECKING:
    from household_hub.containers import AppContainer
    from household_hub.domain.models import (
        AuthSession,
        House,
        Member,
        Profile,
        UserRecord,
    )

router = APIRouter(tags=["auth"])


async def require_token(authorization: str | None = Header(default=None)) -> str:
    """Return the bearer token of the request or reject it."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing_token",
        )
    return token.strip()


@router.post("/auth/login")
async def login(payload: LoginRequest, request: Request) -> dict[str, object]:
    """Log in and return the token with its user."""
    container: AppContainer = request.app.state.container
    session = await container.auth_service.login(payload.email, payload.password)
    return _serialize_session(session)


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, request: Request) -> dict[str, object]:
    """Create an account."""
    container: AppContainer = request.app.state.container
    session = await container.auth_service.signup(
        payload.display_name, payload.email, payload.password
    )
    if session is None:
        return {"ok": True}
    return _serialize_session(session)


@router.get("/auth/me")
async def me(
    request: Request, token: str = Depends(require_token)
) -> dict[str, object]:
    """Return the current user and house."""
    container: AppContainer = request.app.state.container
    profile = await container.auth_service.me(token)
    return _serialize_profile(profile)


@router.post("/houses", status_code=status.HTTP_201_CREATED)
async def create_house(
    payload: CreateHouseRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Create a house and join it."""
    container: AppContainer = request.app.state.container
    house = await container.house_service.create_house(token, payload.name)
    return {"house": _serialize_house(house)}


@router.post("/houses/join")
async def join_house(
    payload: JoinHouseRequest,
    request: Request,
    token: str = Depends(require_token),
) -> dict[str, object]:
    """Join a house by id."""
    container: AppContainer = request.app.state.container
    house = await container.house_service.join_house(token, payload.house_id)
    return {"house": _serialize_house(house)}


@router.post("/houses/leave")
async def leave_house(
    request: Request, token: str = Depends(require_token)
) -> dict[str, str]:
    """Leave the current house."""
    container: AppContainer = request.app.state.container
    await container.house_service.leave_house(token)
    return {"status": "ok"}


@router.get("/houses/members")
async def list_members(
    request: Request, token: str = Depends(require_token)
) -> list[dict[str, object]]:
    """Return members of the current house."""
    container: AppContainer = request.app.state.container
    members = await container.house_service.list_members(token)
    return [_serialize_member(member) for member in members]


def _serialize_user(user: UserRecord) -> dict[str, object]:
    return {
        "id": user.id,
        "email": user.email,
        "displayName": user.display_name,
        "houseId": user.house_id,
    }


def _serialize_house(house: House | None) -> dict[str, object] | None:
    if house is None:
        return None
    return {"id": house.id, "name": house.name}


def _serialize_session(session: AuthSession) -> dict[str, object]:
    return {"token": session.token, "user": _serialize_user(session.user)}


def _serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "user": _serialize_user(profile.user),
        "house": _serialize_house(profile.house),
    }


def _serialize_member(member: Member) -> dict[str, object]:
    return {
        "id": member.id,
        "displayName": member.display_name,
        "email": member.email,
    }

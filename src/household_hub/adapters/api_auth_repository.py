"""Backend implementation of the auth and house repositories."""

from dataclasses import dataclass

from household_hub.adapters.api_client import ApiClient
from household_hub.domain.models import (
    AuthSession,
    House,
    Member,
    Profile,
    UserRecord,
)
from household_hub.services.auth import AuthRepository
from household_hub.services.houses import HouseRepository


@dataclass
class ApiAuthRepository(AuthRepository):
    """REST-backed auth repository."""

    client: ApiClient

    async def login(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""
        data = await self.client.post(
            "/auth/login",
            json={"email": email, "password": password},
            default_error="login_failed",
        )
        if not isinstance(data, dict) or not data.get("token"):
            raise RuntimeError("Login response carried no token")
        return AuthSession(token=str(data["token"]), user=_parse_user(data["user"]))

    async def signup(
        self, display_name: str, email: str, password: str
    ) -> AuthSession | None:
        """Register a new account."""
        data = await self.client.post(
            "/auth/signup",
            json={"displayName": display_name, "email": email, "password": password},
            default_error="signup_failed",
        )
        if isinstance(data, dict) and data.get("token") and data.get("user"):
            return AuthSession(
                token=str(data["token"]), user=_parse_user(data["user"])
            )
        return None

    async def me(self, token: str) -> Profile:
        """Return the profile behind a token.

        Accepts ``{"user": ..., "house": ...}`` as well as a bare user object.
        """
        data = await self.client.get("/auth/me", token=token)
        if not isinstance(data, dict):
            raise RuntimeError("Unexpected /auth/me response")
        user_row = data.get("user", data)
        house_row = data.get("house")
        return Profile(
            user=_parse_user(user_row),  # type: ignore[arg-type]
            house=_parse_house(house_row) if isinstance(house_row, dict) else None,
        )


@dataclass
class ApiHouseRepository(HouseRepository):
    """REST-backed house repository."""

    client: ApiClient

    async def create_house(self, token: str, name: str) -> House | None:
        """Create a house and join it."""
        data = await self.client.post(
            "/houses",
            token=token,
            json={"name": name},
            default_error="create_house_failed",
        )
        return _parse_house(data) if isinstance(data, dict) else None

    async def join_house(self, token: str, house_id: str) -> House | None:
        """Join an existing house."""
        data = await self.client.post(
            "/houses/join",
            token=token,
            json={"houseId": house_id},
            default_error="join_house_failed",
        )
        return _parse_house(data) if isinstance(data, dict) else None

    async def leave_house(self, token: str) -> None:
        """Leave the current house."""
        await self.client.post(
            "/houses/leave", token=token, default_error="leave_house_failed"
        )

    async def list_members(self, token: str) -> list[Member]:
        """Return members of the current house."""
        data = await self.client.get("/houses/members", token=token)
        if not isinstance(data, list):
            return []
        return [
            Member(
                id=str(row["id"]),
                display_name=str(row.get("displayName", "")),
                email=str(row.get("email", "")),
            )
            for row in data
        ]


def _parse_user(row: dict[str, object]) -> UserRecord:
    """Parse a user row into a domain model."""
    return UserRecord(
        id=str(row["id"]),
        email=str(row.get("email", "")),
        display_name=str(row.get("displayName", "")),
        house_id=row.get("houseId") or None,  # type: ignore[arg-type]
    )


def _parse_house(row: dict[str, object]) -> House | None:
    """Parse a house row; rows without an id yield ``None``."""
    house = row.get("house", row)
    if not isinstance(house, dict) or not house.get("id"):
        return None
    return House(id=str(house["id"]), name=str(house.get("name", "")))

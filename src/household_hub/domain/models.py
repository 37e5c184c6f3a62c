"""Domain models for users and houses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class House:
    """Household shared by its members."""

    id: str
    name: str


@dataclass(frozen=True)
class UserRecord:
    """Authenticated user as returned by the backend."""

    id: str
    email: str
    display_name: str
    house_id: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Bearer token issued at login together with its user."""

    token: str
    user: UserRecord


@dataclass(frozen=True)
class Profile:
    """Current user with the house they belong to, if any."""

    user: UserRecord
    house: House | None


@dataclass(frozen=True)
class Member:
    """Member of the current house, used as a chore assignee."""

    id: str
    display_name: str
    email: str

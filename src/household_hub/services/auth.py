"""Authentication against the backend."""

import re
from dataclasses import dataclass
from typing import Protocol

from household_hub.domain.models import AuthSession, Profile

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class AuthRepository(Protocol):
    """Interface for the backend's auth endpoints."""

    async def login(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""

    async def signup(
        self, display_name: str, email: str, password: str
    ) -> AuthSession | None:
        """Register a new account."""

    async def me(self, token: str) -> Profile:
        """Return the profile behind a token."""


@dataclass
class AuthService:
    """Application service for login, signup and the current profile."""

    repository: AuthRepository

    async def login(self, email: str, password: str) -> AuthSession:
        """Log in with email and password."""
        cleaned = _validate_email(email)
        if not password:
            raise ValueError("password_required")
        return await self.repository.login(cleaned, password)

    async def signup(
        self, display_name: str, email: str, password: str
    ) -> AuthSession | None:
        """Create an account; returns a session when the backend issues one."""
        name = display_name.strip()
        if not name:
            raise ValueError("name_required")
        cleaned = _validate_email(email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError("password_too_short")
        return await self.repository.signup(name, cleaned, password)

    async def me(self, token: str) -> Profile:
        """Return the current user and house."""
        return await self.repository.me(token)


def _validate_email(email: str) -> str:
    cleaned = email.strip()
    if not _EMAIL_PATTERN.match(cleaned):
        raise ValueError("invalid_email")
    return cleaned

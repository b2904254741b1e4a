"""Access token verification."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class AuthClient(Protocol):
    """Resolves access tokens issued by the auth provider."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, or None."""


@dataclass
class AuthService:
    """Authenticates requests and applies the optional allow list."""

    client: AuthClient
    allowed_user_ids: set[UUID] | None = None

    def authenticate(self, access_token: str) -> UUID | None:
        """Return the user id when the token is valid and the user is allowed."""
        if not access_token.strip():
            return None
        user_id = self.client.get_user_id(access_token)
        if user_id is None:
            return None
        if self.allowed_user_ids is not None and user_id not in self.allowed_user_ids:
            return None
        return user_id

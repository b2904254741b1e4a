"""Supabase auth adapter for access token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from wellness_tracker.services.auth import AuthClient

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves user ids through Supabase auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, or None."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError:
            _logger.info("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))

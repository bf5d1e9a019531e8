"""Supabase Auth adapter."""

from dataclasses import dataclass

from supabase import Client

from headshot_studio.domain.auth import AuthUser
from headshot_studio.services.auth import AuthClient


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves Supabase access tokens to users."""

    client: Client

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for a Supabase access token."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return AuthUser(id=str(response.user.id), email=response.user.email)

    def sign_out(self, access_token: str) -> None:
        """Revoke every session of the token's user."""
        self.client.auth.admin.sign_out(access_token)

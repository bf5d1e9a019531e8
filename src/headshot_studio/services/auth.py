"""Authentication boundary and session state notifications."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from headshot_studio.domain.auth import AuthState, AuthUser
from headshot_studio.domain.errors import AuthenticationError

_logger = logging.getLogger(__name__)

AuthCallback = Callable[[AuthState], None]


class AuthClient(Protocol):
    """Interface for the identity provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for an access token, if it is valid."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""


@dataclass
class AuthStateNotifier:
    """Process-wide holder of the latest session state.

    Subscribers receive the latest state as soon as they subscribe and every
    state published afterwards, until they call the returned unsubscribe.
    """

    state: AuthState = field(default_factory=lambda: AuthState(None, is_loading=True))
    _subscribers: list[AuthCallback] = field(default_factory=list, init=False)

    def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """Register a callback and return a function that removes it."""
        self._subscribers.append(callback)
        callback(self.state)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, state: AuthState) -> None:
        """Record a new state and notify subscribers."""
        self.state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                _logger.exception("Auth state subscriber failed")


@dataclass
class AuthService:
    """Resolves access tokens and publishes session changes."""

    client: AuthClient
    notifier: AuthStateNotifier = field(default_factory=AuthStateNotifier)

    async def authenticate(self, access_token: str) -> AuthUser:
        """Return the user behind a token or raise AuthenticationError."""
        try:
            user = await asyncio.to_thread(self.client.get_user, access_token)
        except Exception as exc:
            raise AuthenticationError("Could not verify access token") from exc
        if user is None:
            raise AuthenticationError("Invalid access token")
        current = self.notifier.state
        if current.is_loading or current.user != user:
            self.notifier.publish(AuthState(user=user))
        return user

    async def sign_out(self, access_token: str, user: AuthUser) -> None:
        """End the user's session and announce it."""
        await asyncio.to_thread(self.client.sign_out, access_token)
        self.notifier.publish(AuthState(user=None, signed_out_user_id=user.id))
        _logger.info("User signed out: user_id=%s", user.id)

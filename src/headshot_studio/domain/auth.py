"""Domain models for authenticated users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """A user resolved from an access token."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthState:
    """Latest known session state."""

    user: AuthUser | None
    is_loading: bool = False
    signed_out_user_id: str | None = None

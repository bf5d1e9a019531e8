"""Bearer token authentication for API routes."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from headshot_studio.domain.auth import AuthUser
from headshot_studio.domain.errors import AuthenticationError

if TYPE_CHECKING:
    from headshot_studio.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


def _bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> AuthUser:
    """Resolve the bearer token to a user or reject the request."""
    container: AppContainer = request.app.state.container
    token = _bearer_token(authorization)
    try:
        return await container.auth_service.authenticate(token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


@router.post("/sign-out")
async def sign_out(
    request: Request,
    authorization: str | None = Header(default=None),
    user: AuthUser = Depends(require_user),
) -> dict[str, str]:
    """Sign the user out and close their wizard sessions."""
    container: AppContainer = request.app.state.container
    await container.auth_service.sign_out(_bearer_token(authorization), user)
    return {"status": "ok"}

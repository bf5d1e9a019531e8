"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from headshot_studio.api.auth import router as auth_router
from headshot_studio.api.gallery import router as gallery_router
from headshot_studio.api.models import CatalogOptionModel, CatalogResponse
from headshot_studio.api.wizards import router as wizards_router
from headshot_studio.app_logging import configure_logging
from headshot_studio.containers import AppContainer
from headshot_studio.domain.auth import AuthState
from headshot_studio.domain.errors import (
    GenerationCancelledError,
    WizardNotFoundError,
    WizardStateError,
)
from headshot_studio.domain.headshots import BACKGROUND_OPTIONS, STYLE_OPTIONS


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    def log_auth_state(state: AuthState) -> None:
        if state.is_loading:
            return
        if state.user is not None:
            logger.info("Auth state: user_id=%s signed in", state.user.id)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        notifier = state_container.auth_service.notifier
        unsubscribers = [
            notifier.subscribe(state_container.wizard_service.handle_auth_state),
            notifier.subscribe(log_auth_state),
        ]
        yield
        for unsubscribe in unsubscribers:
            unsubscribe()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(wizards_router)
    app.include_router(gallery_router)

    @app.exception_handler(WizardNotFoundError)
    async def wizard_not_found(
        request: Request, exc: WizardNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Wizard not found."},
        )

    @app.exception_handler(WizardStateError)
    async def wizard_state_conflict(
        request: Request, exc: WizardStateError
    ) -> JSONResponse:
        if isinstance(exc, GenerationCancelledError):
            logger.info("Generation cancelled: path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/catalog")
    async def catalog() -> CatalogResponse:
        """Styles and backgrounds offered by the wizard."""
        return CatalogResponse(
            styles=[
                CatalogOptionModel(id=o.id, name=o.name, description=o.description)
                for o in STYLE_OPTIONS
            ],
            backgrounds=[
                CatalogOptionModel(id=o.id, name=o.name, description=o.description)
                for o in BACKGROUND_OPTIONS
            ],
        )

    return app

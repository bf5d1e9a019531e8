"""Gallery endpoints for past generations."""

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from headshot_studio.api.auth import require_user
from headshot_studio.api.models import GalleryResponse, GenerationModel
from headshot_studio.api.responses import attachment_response, describe_error
from headshot_studio.domain.auth import AuthUser
from headshot_studio.domain.errors import DownloadError
from headshot_studio.services.downloads import gallery_filename

if TYPE_CHECKING:
    from headshot_studio.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gallery", tags=["gallery"])


@router.get("")
async def list_generations(
    request: Request, user: AuthUser = Depends(require_user)
) -> GalleryResponse:
    """Return the user's generations, newest first."""
    container: AppContainer = request.app.state.container
    try:
        generations = await container.gallery_service.list_generations(user.id)
    except Exception as exc:
        logger.exception("Failed to load gallery", extra={"user_id": user.id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=describe_error(
                container.settings, exc, "Couldn't load your headshots."
            ),
        ) from exc
    return GalleryResponse(
        generations=[GenerationModel.from_generation(g) for g in generations]
    )


@router.get("/{generation_id}/images/{index}/download")
async def download_image(
    generation_id: str,
    index: int,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Download one image of a stored generation."""
    container: AppContainer = request.app.state.container
    generation = await container.gallery_service.get_generation(
        user.id, generation_id
    )
    if generation is None or not 0 <= index < len(generation.generated_images):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    try:
        download = await container.download_service.download(
            generation.generated_images[index],
            gallery_filename(generation_id, index),
        )
    except DownloadError as exc:
        logger.exception("Download failed", extra={"generation_id": generation_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=describe_error(container.settings, exc, "Download failed."),
        ) from exc
    return attachment_response(download)

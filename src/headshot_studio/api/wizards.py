"""Wizard endpoints driving the generation pipeline."""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response

from headshot_studio.api.auth import require_user
from headshot_studio.api.models import (
    BackgroundSelection,
    StyleSelection,
    WizardResponse,
)
from headshot_studio.api.responses import attachment_response, describe_error
from headshot_studio.domain.auth import AuthUser
from headshot_studio.domain.errors import (
    GENERATION_FAILED_MESSAGE,
    DownloadError,
    GenerationError,
)
from headshot_studio.domain.headshots import ReferenceImage
from headshot_studio.services.downloads import result_filename
from headshot_studio.services.wizard import WizardSession

if TYPE_CHECKING:
    from headshot_studio.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wizards", tags=["wizards"])


def _session(request: Request, wizard_id: UUID, user: AuthUser) -> WizardSession:
    container: AppContainer = request.app.state.container
    return container.wizard_service.get(wizard_id, user.id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_wizard(
    request: Request, user: AuthUser = Depends(require_user)
) -> WizardResponse:
    """Start a new wizard session."""
    container: AppContainer = request.app.state.container
    return WizardResponse.from_session(container.wizard_service.create(user.id))


@router.get("/{wizard_id}")
async def get_wizard(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> WizardResponse:
    """Return the wizard's step, selections, progress and results."""
    return WizardResponse.from_session(_session(request, wizard_id, user))


@router.delete("/{wizard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_wizard(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> None:
    """End the wizard session and release its images."""
    container: AppContainer = request.app.state.container
    container.wizard_service.close(wizard_id, user.id)


@router.post("/{wizard_id}/images")
async def upload_images(
    wizard_id: UUID,
    request: Request,
    files: list[UploadFile] = File(...),
    user: AuthUser = Depends(require_user),
) -> WizardResponse:
    """Add reference photos; photos beyond the maximum are dropped."""
    container: AppContainer = request.app.state.container
    session = _session(request, wizard_id, user)
    max_bytes = container.settings.max_reference_image_bytes
    images: list[ReferenceImage] = []
    for upload in files:
        content_type = upload.content_type or "image/jpeg"
        if not content_type.startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail=f"{upload.filename} is not an image.",
            )
        content = await upload.read()
        if len(content) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"{upload.filename} is larger than {max_bytes} bytes.",
            )
        images.append(
            ReferenceImage(
                filename=upload.filename or "image",
                content=content,
                content_type=content_type,
            )
        )
    session.add_images(images)
    return WizardResponse.from_session(session)


@router.delete("/{wizard_id}/images/{index}")
async def remove_image(
    wizard_id: UUID,
    index: int,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> WizardResponse:
    """Remove a reference photo."""
    session = _session(request, wizard_id, user)
    session.remove_image(index)
    return WizardResponse.from_session(session)


@router.put("/{wizard_id}/style")
async def select_style(
    wizard_id: UUID,
    body: StyleSelection,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> WizardResponse:
    """Choose the headshot style."""
    session = _session(request, wizard_id, user)
    session.select_style(body.style)
    return WizardResponse.from_session(session)


@router.put("/{wizard_id}/background")
async def select_background(
    wizard_id: UUID,
    body: BackgroundSelection,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> WizardResponse:
    """Choose the background."""
    session = _session(request, wizard_id, user)
    session.select_background(body.background)
    return WizardResponse.from_session(session)


@router.post("/{wizard_id}/advance")
async def advance(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> WizardResponse:
    """Move to the next step when the current step is complete."""
    session = _session(request, wizard_id, user)
    if not session.advance():
        issue = session.validation_issue()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=issue.message if issue else f"Cannot advance from {session.step}.",
        )
    return WizardResponse.from_session(session)


@router.post("/{wizard_id}/generate")
async def generate(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> WizardResponse:
    """Upload the references, generate headshots and save them."""
    container: AppContainer = request.app.state.container
    session = _session(request, wizard_id, user)
    try:
        await container.wizard_service.generate(wizard_id, user.id)
    except GenerationError as exc:
        logger.exception(
            "Generation failed",
            extra={"wizard_id": str(wizard_id), "kind": exc.kind},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=describe_error(container.settings, exc, GENERATION_FAILED_MESSAGE),
        ) from exc
    return WizardResponse.from_session(session)


@router.post("/{wizard_id}/cancel")
async def cancel_generation(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> dict[str, bool]:
    """Cancel the generation attempt in flight."""
    session = _session(request, wizard_id, user)
    return {"cancelled": session.cancel()}


@router.post("/{wizard_id}/restart")
async def restart(
    wizard_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> WizardResponse:
    """Go back to the upload step for another run."""
    session = _session(request, wizard_id, user)
    session.restart()
    return WizardResponse.from_session(session)


@router.get("/{wizard_id}/results/{index}/download")
async def download_result(
    wizard_id: UUID,
    index: int,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Download one generated headshot."""
    container: AppContainer = request.app.state.container
    session = _session(request, wizard_id, user)
    if not 0 <= index < len(session.generated_urls):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    try:
        download = await container.download_service.download(
            session.generated_urls[index], result_filename(index)
        )
    except DownloadError as exc:
        logger.exception("Download failed", extra={"wizard_id": str(wizard_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=describe_error(container.settings, exc, "Download failed."),
        ) from exc
    return attachment_response(download)

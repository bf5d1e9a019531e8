"""Response helpers shared by API routes."""

from fastapi.responses import Response

from headshot_studio.config import Settings
from headshot_studio.services.downloads import ImageDownload


def describe_error(settings: Settings, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(exc).__name__}: {exc} ({type(cause).__name__})".strip()
        return f"{fallback} (debug: {detail})"
    return fallback


def attachment_response(download: ImageDownload) -> Response:
    """Serve downloaded image bytes as a file attachment."""
    return Response(
        content=download.content,
        media_type=download.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{download.filename}"'
        },
    )

"""Pydantic models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel

from headshot_studio.domain.headshots import (
    BackgroundId,
    HeadshotGeneration,
    StyleId,
    background_display_name,
    style_display_name,
)
from headshot_studio.services.wizard import WizardSession


class CatalogOptionModel(BaseModel):
    """Style or background choice."""

    id: str
    name: str
    description: str


class CatalogResponse(BaseModel):
    """Available styles and backgrounds."""

    styles: list[CatalogOptionModel]
    backgrounds: list[CatalogOptionModel]


class StyleSelection(BaseModel):
    """Request body for choosing a style."""

    style: StyleId


class BackgroundSelection(BaseModel):
    """Request body for choosing a background."""

    background: BackgroundId


class WizardSummaryModel(BaseModel):
    """Selections reviewed before generating."""

    image_count: int
    style: str | None
    style_name: str | None
    background: str | None
    background_name: str | None


class ReferenceImageModel(BaseModel):
    """A reference image held by the wizard."""

    index: int
    filename: str
    content_type: str
    size: int


class WizardResponse(BaseModel):
    """Current state of a wizard session."""

    id: str
    step: str
    step_number: int
    step_title: str
    images: list[ReferenceImageModel]
    summary: WizardSummaryModel
    can_advance: bool
    blocked_reason: str | None
    is_generating: bool
    progress: float
    generation_id: str | None
    generated_images: list[str]
    last_error: str | None

    @classmethod
    def from_session(cls, session: WizardSession) -> "WizardResponse":
        """Build the response for a wizard session."""
        issue = session.validation_issue()
        summary = session.summary()
        return cls(
            id=str(session.id),
            step=session.step,
            step_number=session.step.number,
            step_title=session.step.title,
            images=[
                ReferenceImageModel(
                    index=index,
                    filename=image.filename,
                    content_type=image.content_type,
                    size=len(image.content),
                )
                for index, image in enumerate(session.images)
            ],
            summary=WizardSummaryModel(
                image_count=summary.image_count,
                style=summary.style,
                style_name=summary.style_name,
                background=summary.background,
                background_name=summary.background_name,
            ),
            can_advance=session.can_advance,
            blocked_reason=issue.message if issue else None,
            is_generating=session.is_generating,
            progress=round(session.progress.value, 2),
            generation_id=session.generation_id,
            generated_images=list(session.generated_urls),
            last_error=session.last_error.kind if session.last_error else None,
        )


class GenerationModel(BaseModel):
    """A stored generation as shown in the gallery."""

    id: str
    style: str
    style_name: str
    background: str
    background_name: str
    reference_images: list[str]
    generated_images: list[str]
    created_at: datetime | None
    created_label: str | None

    @classmethod
    def from_generation(cls, generation: HeadshotGeneration) -> "GenerationModel":
        """Build the gallery entry for a generation."""
        return cls(
            id=generation.id,
            style=generation.style,
            style_name=style_display_name(generation.style),
            background=generation.background,
            background_name=background_display_name(generation.background),
            reference_images=generation.reference_images,
            generated_images=generation.generated_images,
            created_at=generation.created_at,
            created_label=(
                _format_date(generation.created_at) if generation.created_at else None
            ),
        )


class GalleryResponse(BaseModel):
    """A user's generation history, newest first."""

    generations: list[GenerationModel]


def _format_date(value: datetime) -> str:
    return f"{value:%b} {value.day}, {value.year}"

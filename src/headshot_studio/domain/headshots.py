"""Domain models for headshot generation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class StyleId(StrEnum):
    """Headshot styles offered by the wizard."""

    BUSINESS = "business"
    CASUAL = "casual"
    CREATIVE = "creative"


class BackgroundId(StrEnum):
    """Backgrounds offered by the wizard."""

    STUDIO = "studio"
    OFFICE = "office"
    OUTDOOR = "outdoor"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CatalogOption:
    """Display metadata for a style or background."""

    id: str
    name: str
    description: str


STYLE_OPTIONS: tuple[CatalogOption, ...] = (
    CatalogOption(
        StyleId.BUSINESS, "Business Professional", "Corporate and formal look"
    ),
    CatalogOption(StyleId.CASUAL, "Casual Professional", "Relaxed but professional"),
    CatalogOption(StyleId.CREATIVE, "Creative Professional", "Artistic and modern"),
)

BACKGROUND_OPTIONS: tuple[CatalogOption, ...] = (
    CatalogOption(BackgroundId.STUDIO, "Studio", "Clean studio background"),
    CatalogOption(BackgroundId.OFFICE, "Office", "Professional office setting"),
    CatalogOption(BackgroundId.OUTDOOR, "Outdoor", "Natural outdoor environment"),
    CatalogOption(BackgroundId.CUSTOM, "Custom", "AI-generated background"),
)


def style_display_name(style: str) -> str:
    """Return the display name for a style id, or the id itself."""
    return _display_name(STYLE_OPTIONS, style)


def background_display_name(background: str) -> str:
    """Return the display name for a background id, or the id itself."""
    return _display_name(BACKGROUND_OPTIONS, background)


def _display_name(options: tuple[CatalogOption, ...], value: str) -> str:
    for option in options:
        if option.id == value:
            return option.name
    return value


@dataclass(frozen=True)
class ReferenceImage:
    """A user-supplied photo held in memory for one wizard session."""

    filename: str
    content: bytes
    content_type: str = "image/jpeg"


@dataclass(frozen=True)
class WizardSelection:
    """Style and background chosen for a generation attempt."""

    style: StyleId
    background: BackgroundId


@dataclass(frozen=True)
class GenerationRequest:
    """Request sent to the image generation collaborator."""

    reference_urls: list[str]
    prompt: str
    quality: str = "high"
    count: int = 4


@dataclass(frozen=True)
class GenerationResult:
    """URLs produced by one generation call."""

    generated_urls: list[str]


@dataclass(frozen=True)
class NewHeadshotGeneration:
    """Record fields handed to the record store.

    Image lists are JSON-encoded strings, matching what the store persists.
    """

    user_id: str
    style: str
    background: str
    reference_images: str
    generated_images: str
    created_at: datetime


@dataclass(frozen=True)
class HeadshotGeneration:
    """Normalized view of a persisted generation record."""

    id: str
    user_id: str
    style: str
    background: str
    reference_images: list[str] = field(default_factory=list)
    generated_images: list[str] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of a successful generation attempt."""

    generation_id: str
    generated_urls: list[str]

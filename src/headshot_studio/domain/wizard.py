"""Domain models for the headshot wizard."""

from dataclasses import dataclass
from enum import StrEnum

MIN_REFERENCE_IMAGES = 3
MAX_REFERENCE_IMAGES = 10


class WizardStep(StrEnum):
    """Wizard steps in the order they are visited."""

    UPLOAD = "upload"
    STYLE = "style"
    BACKGROUND = "background"
    GENERATE = "generate"
    RESULTS = "results"

    @property
    def number(self) -> int:
        """1-based position of the step."""
        return list(WizardStep).index(self) + 1

    @property
    def title(self) -> str:
        """Heading shown for the step."""
        return _STEP_TITLES[self]


_STEP_TITLES = {
    WizardStep.UPLOAD: "Upload Reference Photos",
    WizardStep.STYLE: "Choose Your Style",
    WizardStep.BACKGROUND: "Select Background",
    WizardStep.GENERATE: "Generate Headshots",
    WizardStep.RESULTS: "Your Professional Headshots",
}


@dataclass(frozen=True)
class ValidationIssue:
    """Reason a wizard transition is blocked."""

    step: WizardStep
    message: str


@dataclass(frozen=True)
class WizardSummary:
    """Dry-run summary shown before generation starts."""

    image_count: int
    style: str | None
    style_name: str | None
    background: str | None
    background_name: str | None

"""Wizard state machine for headshot generation sessions."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from headshot_studio.domain.auth import AuthState
from headshot_studio.domain.errors import (
    GenerationCancelledError,
    GenerationError,
    GenerationInProgressError,
    WizardNotFoundError,
    WizardStateError,
)
from headshot_studio.domain.headshots import (
    BackgroundId,
    GenerationOutcome,
    ReferenceImage,
    StyleId,
    WizardSelection,
    background_display_name,
    style_display_name,
)
from headshot_studio.domain.wizard import (
    MAX_REFERENCE_IMAGES,
    MIN_REFERENCE_IMAGES,
    ValidationIssue,
    WizardStep,
    WizardSummary,
)
from headshot_studio.services.generation import GenerationService
from headshot_studio.services.uploads import ProgressTracker

_logger = logging.getLogger(__name__)

_NEXT_STEP = {
    WizardStep.UPLOAD: WizardStep.STYLE,
    WizardStep.STYLE: WizardStep.BACKGROUND,
    WizardStep.BACKGROUND: WizardStep.GENERATE,
}


@dataclass
class WizardSession:
    """One user's pass through upload, style, background, generate, results.

    Transitions are linear. ``advance`` only moves forward when the current
    step's guard holds; a blocked guard is reported through
    ``validation_issue`` and never raised. Reaching ``generate`` does not
    start generation: ``generate`` is a separate action so the summary can
    be reviewed before the remote call is made.
    """

    user_id: str
    id: UUID = field(default_factory=uuid4)
    step: WizardStep = WizardStep.UPLOAD
    images: list[ReferenceImage] = field(default_factory=list)
    style: StyleId | None = None
    background: BackgroundId | None = None
    progress: ProgressTracker = field(default_factory=ProgressTracker)
    generated_urls: list[str] = field(default_factory=list)
    generation_id: str | None = None
    last_error: GenerationError | None = None
    _task: asyncio.Task | None = field(default=None, init=False, repr=False)
    _cancel_requested: bool = field(default=False, init=False, repr=False)

    @property
    def is_generating(self) -> bool:
        """Whether a generation attempt is in flight."""
        return self._task is not None and not self._task.done()

    def add_images(self, images: Iterable[ReferenceImage]) -> int:
        """Add images, dropping any beyond the maximum; returns how many were kept."""
        self._require_step(WizardStep.UPLOAD)
        before = len(self.images)
        self.images = [*self.images, *images][:MAX_REFERENCE_IMAGES]
        return len(self.images) - before

    def remove_image(self, index: int) -> None:
        """Remove the image at index."""
        self._require_step(WizardStep.UPLOAD)
        if not 0 <= index < len(self.images):
            raise WizardStateError(f"No reference image at index {index}")
        del self.images[index]

    def select_style(self, style: StyleId) -> None:
        """Choose the headshot style."""
        self._require_step(WizardStep.STYLE)
        self.style = style

    def select_background(self, background: BackgroundId) -> None:
        """Choose the background."""
        self._require_step(WizardStep.BACKGROUND)
        self.background = background

    def validation_issue(self) -> ValidationIssue | None:
        """Return what blocks the next transition, if anything."""
        if self.step == WizardStep.UPLOAD and len(self.images) < MIN_REFERENCE_IMAGES:
            return ValidationIssue(
                self.step,
                f"Upload at least {MIN_REFERENCE_IMAGES} photos "
                f"(up to {MAX_REFERENCE_IMAGES}).",
            )
        if self.step == WizardStep.STYLE and self.style is None:
            return ValidationIssue(self.step, "Choose a style to continue.")
        if self.step == WizardStep.BACKGROUND and self.background is None:
            return ValidationIssue(self.step, "Choose a background to continue.")
        return None

    @property
    def can_advance(self) -> bool:
        """Whether ``advance`` would move to another step."""
        return self.step in _NEXT_STEP and self.validation_issue() is None

    def advance(self) -> bool:
        """Move to the next step when allowed; returns whether the step changed."""
        next_step = _NEXT_STEP.get(self.step)
        if next_step is None or self.validation_issue() is not None:
            return False
        self.step = next_step
        return True

    def summary(self) -> WizardSummary:
        """Return the summary of the current selections."""
        return WizardSummary(
            image_count=len(self.images),
            style=self.style,
            style_name=style_display_name(self.style) if self.style else None,
            background=self.background,
            background_name=(
                background_display_name(self.background) if self.background else None
            ),
        )

    async def generate(self, service: GenerationService) -> GenerationOutcome:
        """Run one generation attempt; moves to results on success.

        On failure the wizard stays in ``generate`` with its selections and
        images intact, the failure is kept in ``last_error`` and re-raised.
        """
        self._require_step(WizardStep.GENERATE)
        if self.style is None or self.background is None:
            raise WizardStateError("Style and background must be selected")
        selection = WizardSelection(style=self.style, background=self.background)
        self.progress.reset()
        self.last_error = None
        self._cancel_requested = False
        self._task = asyncio.create_task(
            service.generate(list(self.images), selection, self.user_id, self.progress)
        )
        try:
            outcome = await self._task
        except GenerationError as exc:
            self.last_error = exc
            _logger.warning(
                "Generation failed: wizard_id=%s kind=%s error=%s",
                self.id,
                exc.kind,
                exc,
            )
            raise
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            raise GenerationCancelledError("Generation was cancelled") from None
        finally:
            self._task = None
            self._cancel_requested = False
        self.generated_urls = outcome.generated_urls
        self.generation_id = outcome.generation_id
        self.step = WizardStep.RESULTS
        return outcome

    def cancel(self) -> bool:
        """Cancel the in-flight attempt; returns whether one was running."""
        if not self.is_generating:
            return False
        self._cancel_requested = True
        self._task.cancel()
        _logger.info("Generation cancelled: wizard_id=%s", self.id)
        return True

    def restart(self) -> None:
        """Start a new run from the results step."""
        self._require_step(WizardStep.RESULTS)
        self.step = WizardStep.UPLOAD
        self.generated_urls = []
        self.generation_id = None
        self.last_error = None
        self.progress.reset()

    def close(self) -> None:
        """Release the session's images and any in-flight attempt."""
        self.cancel()
        self.images.clear()

    def _require_step(self, step: WizardStep) -> None:
        if self.is_generating:
            raise GenerationInProgressError("Generation is already running")
        if self.step != step:
            raise WizardStateError(
                f"Action requires the {step} step, wizard is at {self.step}"
            )


@dataclass
class WizardService:
    """In-memory registry of wizard sessions."""

    generation_service: GenerationService
    _sessions: dict[UUID, WizardSession] = field(default_factory=dict, init=False)

    def create(self, user_id: str) -> WizardSession:
        """Start a new wizard session for a user."""
        session = WizardSession(user_id=user_id)
        self._sessions[session.id] = session
        _logger.info("Wizard created: wizard_id=%s user_id=%s", session.id, user_id)
        return session

    def get(self, wizard_id: UUID, user_id: str) -> WizardSession:
        """Return a user's wizard session."""
        session = self._sessions.get(wizard_id)
        if session is None or session.user_id != user_id:
            raise WizardNotFoundError(str(wizard_id))
        return session

    async def generate(self, wizard_id: UUID, user_id: str) -> GenerationOutcome:
        """Run generation for a user's wizard session."""
        session = self.get(wizard_id, user_id)
        return await session.generate(self.generation_service)

    def close(self, wizard_id: UUID, user_id: str) -> None:
        """End a user's wizard session."""
        session = self.get(wizard_id, user_id)
        session.close()
        del self._sessions[wizard_id]

    def close_for_user(self, user_id: str) -> int:
        """End every session owned by a user; returns how many were closed."""
        owned = [s for s in self._sessions.values() if s.user_id == user_id]
        for session in owned:
            session.close()
            del self._sessions[session.id]
        return len(owned)

    def handle_auth_state(self, state: AuthState) -> None:
        """Close the sessions of a user who signed out."""
        if state.signed_out_user_id is None:
            return
        closed = self.close_for_user(state.signed_out_user_id)
        if closed:
            _logger.info(
                "Closed %s wizard sessions after sign-out: user_id=%s",
                closed,
                state.signed_out_user_id,
            )

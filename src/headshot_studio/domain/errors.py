"""Error types raised by the headshot pipeline."""

GENERATION_FAILED_MESSAGE = "Generation failed. Please try again."


class GenerationError(Exception):
    """Base class for failures of a generation attempt.

    Every subclass is shown to users with the same generic message; ``kind``
    keeps the failure distinguishable for logs and diagnostics.
    """

    kind = "generation"
    user_message = GENERATION_FAILED_MESSAGE


class UploadError(GenerationError):
    """A reference image could not be uploaded to storage."""

    kind = "upload"


class RemoteGenerationError(GenerationError):
    """The image generation call failed."""

    kind = "remote_generation"


class EmptyResultError(GenerationError):
    """The image generation call produced no usable URLs."""

    kind = "empty_result"


class PersistenceError(GenerationError):
    """The generation record could not be written."""

    kind = "persistence"


class WizardStateError(Exception):
    """An operation is not allowed in the wizard's current step."""


class GenerationInProgressError(WizardStateError):
    """A generation attempt is already running for the wizard."""


class WizardNotFoundError(LookupError):
    """No wizard session exists for the given id and user."""


class AuthenticationError(Exception):
    """The access token does not resolve to a user."""


class DownloadError(Exception):
    """An image could not be fetched for download."""


class GenerationCancelledError(WizardStateError):
    """The in-flight generation attempt was cancelled by the user."""

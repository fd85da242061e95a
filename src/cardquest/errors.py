"""Error taxonomy for the scenario composition and evaluation pipeline."""

from typing import Optional


PREVIEW_LENGTH = 200


class ScenarioError(Exception):
    """
    Base class for all pipeline errors surfaced to the participant.

    Every error carries a short human-readable message and a flag telling
    the caller whether a manual retry can succeed.
    """

    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IncompleteSelection(ScenarioError):
    """A category has no card where one is required."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Select one card for every category (missing: {', '.join(self.missing)})"
        )


class ValidationError(ScenarioError):
    """A required participant input is empty or out of range."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"'{field}' is required")


class CatalogUnavailable(ScenarioError):
    """The card catalog could not be loaded for a category."""

    retryable = True

    def __init__(self, category: str, detail: str = ""):
        self.category = category
        self.detail = detail
        super().__init__(f"Failed to load cards for '{category}'. Reload and try again.")


class AIServiceUnavailable(ScenarioError):
    """The AI evaluation call failed (network error or non-success status)."""

    retryable = True

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__("AI evaluation failed. Wait a moment and try again.")


class MalformedAIResponse(ScenarioError):
    """
    The AI answered, but no structured result could be extracted.

    Only the raw length and a bounded preview of the candidate text are
    kept, so untrusted output never reaches logs in full.
    """

    retryable = True

    def __init__(self, raw_length: int, preview: str, detail: str = ""):
        self.raw_length = raw_length
        self.preview = preview[:PREVIEW_LENGTH]
        self.detail = detail
        super().__init__("Could not read the AI response. Please try again.")


class PersistenceFailed(ScenarioError):
    """Saving the evaluated scenario to the external registry failed."""

    retryable = True

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__("Saving the plan failed. Your evaluation is still available.")


class SubmissionInProgress(ScenarioError):
    """A submission is already waiting on the AI service."""

    def __init__(self):
        super().__init__("An evaluation is already running for this session.")

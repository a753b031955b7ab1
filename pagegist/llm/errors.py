from __future__ import annotations

from typing import Optional


class SummaryError(Exception):
    """Base class for every failure surfaced by the summarizer."""

    kind = "summary-error"
    retryable = False


class MissingCredentialError(SummaryError):
    kind = "missing-credential"

    def __init__(self, message: str = "Missing API key.") -> None:
        super().__init__(message)


class ModelMismatchError(SummaryError):
    """The requested model is absent or does not support generation."""

    kind = "model-mismatch"
    retryable = True

    def __init__(self, message: str, *, model: Optional[str] = None) -> None:
        super().__init__(message)
        self.model = model


class FatalApiError(SummaryError):
    """Auth, quota, malformed request or transport failure."""

    kind = "fatal-api-error"

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResultError(FatalApiError):
    kind = "empty-result"

    def __init__(self, message: str = "No summary returned from Gemini.") -> None:
        super().__init__(message)


class NoWorkingModelError(SummaryError):
    kind = "no-working-model"

    def __init__(self, last_error: Optional[BaseException] = None) -> None:
        detail = str(last_error) if last_error is not None and str(last_error) else "Unknown"
        super().__init__(f"Could not find any working Gemini model. Last error: {detail}")
        self.last_error = last_error

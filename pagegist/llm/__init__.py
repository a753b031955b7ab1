__all__ = [
    "Summarizer",
    "GeminiClient",
    "SummaryError",
    "MissingCredentialError",
    "ModelMismatchError",
    "FatalApiError",
    "EmptyResultError",
    "NoWorkingModelError",
]

from .summarizer import Summarizer
from .client import GeminiClient
from .errors import (
    EmptyResultError,
    FatalApiError,
    MissingCredentialError,
    ModelMismatchError,
    NoWorkingModelError,
    SummaryError,
)

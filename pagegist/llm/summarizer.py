from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .client import GeminiClient
from .errors import MissingCredentialError, NoWorkingModelError, SummaryError
from .models import DEFAULT_MODELS
from .prompt import MAX_CONTENT_CHARS, build_summary_prompt


logger = logging.getLogger(__name__)


class Summarizer:
    """Web page summarizer that hides model churn behind a fallback sweep.

    Candidates are tried in preference order. Once a model produces a
    summary it is remembered in ``resolved_model`` and becomes the only
    candidate for later calls. If every candidate reports that the model is
    unknown, the provider is asked which models the key can use and the
    first one is tried.

    The instance is not locked: overlapping calls may overwrite
    ``resolved_model``, which only costs an extra attempt later.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        *,
        models: Optional[Sequence[str]] = None,
        max_chars: int = MAX_CONTENT_CHARS,
    ) -> None:
        self._client = client
        self.models: List[str] = list(models) if models else list(DEFAULT_MODELS)
        self.max_chars = max_chars
        self.resolved_model: Optional[str] = None

    def _build_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> "Summarizer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _candidates(self) -> List[str]:
        if self.resolved_model:
            return [self.resolved_model]
        return list(self.models)

    def discover_models(self, api_key: str) -> List[str]:
        if not api_key:
            return []
        return self._build_client().list_models(api_key=api_key)

    def summarize(self, text: str, api_key: Optional[str]) -> str:
        if not api_key or not api_key.strip():
            raise MissingCredentialError(
                "Missing API key. Set PAGEGIST_API_KEY or api_key in the config file."
            )
        client = self._build_client()
        prompt = build_summary_prompt(text, self.max_chars)
        last_error: Optional[SummaryError] = None

        for model in self._candidates():
            try:
                summary = client.generate(model, prompt, api_key=api_key)
            except SummaryError as exc:
                if not exc.retryable:
                    logger.warning("Model %s failed with a non-retryable error: %s", model, exc)
                    raise
                logger.info("Model %s failed, trying next: %s", model, exc)
                last_error = exc
                continue
            self.resolved_model = model
            return summary

        available = self.discover_models(api_key)
        logger.info("Discovered %d generation-capable models", len(available))
        if available:
            fallback = available[0]
            try:
                summary = client.generate(fallback, prompt, api_key=api_key)
            except SummaryError as exc:
                last_error = exc
            else:
                self.resolved_model = fallback
                return summary

        raise NoWorkingModelError(last_error)

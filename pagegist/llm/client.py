from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from .errors import EmptyResultError, FatalApiError, ModelMismatchError, SummaryError
from .models import generation_models


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 60.0

_MISMATCH_MARKERS = ("not found", "not supported")


def classify_error(
    message: str,
    *,
    status_code: Optional[int] = None,
    provider_status: Optional[str] = None,
    model: Optional[str] = None,
) -> SummaryError:
    """Map a failed generation call onto the error taxonomy.

    Structured signals win: HTTP 404 or a ``NOT_FOUND`` provider status mean
    the model is unknown. Without them the message text is inspected.
    """
    if status_code == 404 or (provider_status or "").upper() == "NOT_FOUND":
        return ModelMismatchError(message, model=model)
    lowered = message.lower()
    if any(marker in lowered for marker in _MISMATCH_MARKERS):
        return ModelMismatchError(message, model=model)
    return FatalApiError(message, status_code=status_code)


class GeminiClient:
    """Minimal REST client for the generative-language API.

    - Supports supplying a ready ``httpx.Client`` (e.g. backed by
      ``httpx.MockTransport`` in tests).
    - One request per call; no retries happen here.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._owns_http = http_client is None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _build_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=self.timeout)
        return self._http

    def close(self) -> None:
        if self._http is not None and self._owns_http:
            self._http.close()
            self._http = None

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _read_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def generate(self, model: str, prompt: str, *, api_key: str) -> str:
        """Run one generateContent call and return the first candidate's text."""
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = self._build_http().post(
                url,
                params={"key": api_key},
                json=payload,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise FatalApiError(f"Request to model {model} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FatalApiError(f"Request to model {model} failed: {exc}") from exc

        data = self._read_json(response)
        error = data.get("error") if isinstance(data, dict) else None
        if response.is_error or error:
            message = "Unknown API Error"
            provider_status = None
            if isinstance(error, dict):
                message = error.get("message") or message
                provider_status = error.get("status")
            elif data is None:
                message = f"Unknown API Error (HTTP {response.status_code})"
            raise classify_error(
                message,
                status_code=response.status_code if response.is_error else None,
                provider_status=provider_status,
                model=model,
            )
        if not isinstance(data, dict):
            raise FatalApiError(
                f"Malformed response from model {model}", status_code=response.status_code
            )
        return self._first_candidate_text(data)

    @staticmethod
    def _first_candidate_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            raise EmptyResultError()
        candidate = candidates[0] if isinstance(candidates, list) else None
        if not isinstance(candidate, dict):
            raise FatalApiError("Malformed response: candidate is not an object")
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise FatalApiError("Malformed response: candidate content is not an object")
        parts = content.get("parts") or []
        if not parts:
            raise EmptyResultError()
        part = parts[0] if isinstance(parts, list) else None
        if not isinstance(part, dict):
            raise FatalApiError("Malformed response: content part is not an object")
        text = part.get("text")
        if text is None:
            raise EmptyResultError()
        if not isinstance(text, str):
            raise FatalApiError("Malformed response: part text is not a string")
        return text

    def list_models(self, *, api_key: str) -> List[str]:
        """Return generation-capable model names for the key.

        Any failure yields an empty list; callers treat it as "no candidates".
        """
        try:
            response = self._build_http().get(
                f"{self.base_url}/models",
                params={"key": api_key},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("Model listing failed: %s", exc)
            return []
        data = self._read_json(response)
        if response.is_error or not isinstance(data, dict):
            logger.warning("Model listing failed with HTTP %s", response.status_code)
            return []
        entries = data.get("models") or []
        return generation_models(e for e in entries if isinstance(e, dict))

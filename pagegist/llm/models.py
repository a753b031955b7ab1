from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional


# Tried in order until one accepts the request. Older names stay in the list
# because availability differs per key and per API version.
DEFAULT_MODELS = [
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-pro",
]

GENERATE_METHOD = "generateContent"
_MODEL_PREFIX = "models/"


def normalize_model_name(name: str) -> str:
    """Strip the ``models/`` resource prefix returned by the listing endpoint."""
    name = name.strip()
    if name.startswith(_MODEL_PREFIX):
        return name[len(_MODEL_PREFIX):]
    return name


def supports_generation(entry: Mapping[str, Any]) -> bool:
    methods = entry.get("supportedGenerationMethods") or []
    return GENERATE_METHOD in methods


def generation_models(entries: Iterable[Mapping[str, Any]]) -> List[str]:
    out: List[str] = []
    for entry in entries:
        name = entry.get("name")
        if not name or not supports_generation(entry):
            continue
        out.append(normalize_model_name(str(name)))
    return out


def merge_preferences(preferred: Optional[Iterable[str]], fallback: Iterable[str]) -> List[str]:
    """Preferred names first, then the fallback list, without duplicates."""
    seen: set[str] = set()
    out: List[str] = []
    for name in list(preferred or []) + list(fallback):
        name = normalize_model_name(name)
        if not name or name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out

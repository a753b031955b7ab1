from __future__ import annotations

import os
import pathlib
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .llm.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .llm.models import DEFAULT_MODELS
from .llm.prompt import MAX_CONTENT_CHARS


API_KEY_ENV_VARS = ("PAGEGIST_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


@dataclass
class PagegistConfig:
    api_key: Optional[str] = None
    models: List[str] = field(default_factory=lambda: list(DEFAULT_MODELS))
    max_chars: int = MAX_CONTENT_CHARS
    timeout: float = DEFAULT_TIMEOUT
    base_url: str = DEFAULT_BASE_URL
    save_dir: Optional[str] = None
    log_level: str = "warning"


def load_toml(path: str | os.PathLike[str]) -> Dict[str, Any]:
    data = pathlib.Path(path).read_bytes()
    return tomllib.loads(data.decode("utf-8"))


def from_file(path: str | None) -> Dict[str, Any]:
    if not path:
        return {}
    p = pathlib.Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    if p.suffix.lower() in {".toml"}:
        return load_toml(p)
    raise ValueError(f"Unsupported config format: {p.suffix}")


def _split_models(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    models = [m.strip() for m in items if m.strip()]
    return models or None


def merge_config(
    file_cfg: Dict[str, Any],
    env: Mapping[str, str],
    cli: Dict[str, Any],
) -> PagegistConfig:
    llm_cfg = file_cfg.get("llm", {})

    def get_env(name: str) -> Optional[str]:
        return env.get(name) or None

    api_key = cli.get("api_key")
    for var in API_KEY_ENV_VARS:
        api_key = api_key or get_env(var)
    api_key = api_key or file_cfg.get("api_key")

    models = (
        _split_models(cli.get("models"))
        or _split_models(get_env("PAGEGIST_MODELS"))
        or _split_models(llm_cfg.get("models"))
        or list(DEFAULT_MODELS)
    )
    max_chars = cli.get("max_chars") or get_env("PAGEGIST_MAX_CHARS") or llm_cfg.get("max_chars")
    timeout = cli.get("timeout") or get_env("PAGEGIST_TIMEOUT") or llm_cfg.get("timeout")
    base_url = (
        cli.get("base_url")
        or get_env("PAGEGIST_BASE_URL")
        or llm_cfg.get("base_url")
        or DEFAULT_BASE_URL
    )
    save_dir = cli.get("save_dir") or get_env("PAGEGIST_SAVE_DIR") or file_cfg.get("save_dir")
    log_level = (
        cli.get("log_level")
        or get_env("PAGEGIST_LOG_LEVEL")
        or file_cfg.get("log_level")
        or "warning"
    )

    return PagegistConfig(
        api_key=api_key.strip() if isinstance(api_key, str) and api_key.strip() else None,
        models=models,
        max_chars=int(max_chars) if max_chars else MAX_CONTENT_CHARS,
        timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        base_url=base_url,
        save_dir=save_dir,
        log_level=str(log_level),
    )


def load_config(path: str | None = None, cli: Optional[Dict[str, Any]] = None) -> PagegistConfig:
    """Resolve configuration from the TOML file, the environment and CLI flags."""
    path = path or os.environ.get("PAGEGIST_CONFIG")
    return merge_config(from_file(path), os.environ, cli or {})

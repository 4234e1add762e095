from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-3-flash-preview"

EngineBackend = Literal["sdk", "rest"]

_HERE = Path(__file__).resolve()
_PROJECT_ROOT = _HERE.parents[1]


@dataclass(frozen=True)
class EngineSettings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    backend: EngineBackend = "sdk"
    temperature: float = 0.1
    timeout_s: float = 30.0
    use_search: bool = True


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_env() -> None:
    """Load the project .env without overriding variables already set."""
    load_dotenv(_PROJECT_ROOT / ".env", override=False)


def load_settings(*, dotenv: bool = True) -> EngineSettings:
    """Build engine settings from the environment (and the project .env).

    Settings are read once here and handed to the engine client; nothing in
    the pipeline looks at the environment afterwards.
    """
    if dotenv:
        load_env()

    backend = os.getenv("TRUSTLENS_ENGINE", "sdk").strip().lower()
    if backend not in ("sdk", "rest"):
        backend = "sdk"

    return EngineSettings(
        api_key=(os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip(),
        model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
        backend=backend,  # type: ignore[arg-type]
        temperature=_env_float("TRUSTLENS_TEMPERATURE", 0.1),
        timeout_s=max(1.0, _env_float("TRUSTLENS_ENGINE_TIMEOUT_S", 30.0)),
        use_search=_env_bool("TRUSTLENS_USE_SEARCH", True),
    )


def cors_allow_origins() -> list[str]:
    raw = os.getenv("TRUSTLENS_CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:3000"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def log_level() -> int:
    raw = os.getenv("TRUSTLENS_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO

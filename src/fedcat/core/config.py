"""Environment-driven settings."""

from __future__ import annotations

import os
from pathlib import Path

REGISTRY_ENV = "FEDCAT_REGISTRY"
PREVIEW_LEN_ENV = "FEDCAT_PREVIEW_LEN"
SCAN_PARALLEL_ENV = "FEDCAT_SCAN_PARALLEL"
LOG_LEVEL_ENV = "FEDCAT_LOG_LEVEL"

DEFAULT_PREVIEW_LEN = 100
DEFAULT_SCAN_PARALLEL = 4


def registry_path() -> Path:
    """Return the registry file path, honoring env override."""
    override = os.getenv(REGISTRY_ENV)
    if override:
        return Path(override).expanduser()
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "fedcat" / "registry.json"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def preview_len() -> int:
    """Default preview length in characters (0 means the full text)."""
    return max(_int_env(PREVIEW_LEN_ENV, DEFAULT_PREVIEW_LEN), 0)


def scan_parallel() -> int:
    """Default number of files scanned concurrently."""
    return max(_int_env(SCAN_PARALLEL_ENV, DEFAULT_SCAN_PARALLEL), 1)


def log_level() -> str | None:
    raw = os.getenv(LOG_LEVEL_ENV, "").strip()
    return raw.upper() or None

#!/usr/bin/env python3
"""
Centralized configuration for playlist_localizer with env var overrides.
- User config file: ~/.config/playlist_localizer/config.json
- Precedence: environment > user config file > built-in defaults
- Types exposed to the app:
  - MUSIC_ROOT: Path
  - OUTPUT_DIR: Path
  - OUTPUT_FORMAT: str ("m3u" or "extm3u")
  - OUTPUT_EXTENSION: str or None
  - JOBS: int
  - FULL_OVERLAP_SCORING: bool
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

logger = logging.getLogger(__name__)

# Paths
CONFIG_DIR = Path.home() / ".config" / "playlist_localizer"
CONFIG_FILE = CONFIG_DIR / "config.json"

console = Console()

OUTPUT_FORMATS = ("m3u", "extm3u")

# Built-in defaults (sane, user-agnostic)
DEFAULTS = {
    "MUSIC_ROOT": str(Path.home() / "Music"),
    "OUTPUT_DIR": str(Path.home() / ".config" / "cmus" / "playlists"),
    "OUTPUT_FORMAT": "m3u",
    "OUTPUT_EXTENSION": None,  # None -> "m3u"
    "JOBS": 1,
    # Score a reference whose directory chain is a full suffix of the
    # candidate's by the overlap length instead of 0
    "FULL_OVERLAP_SCORING": False,
}

# Environment variable mapping
ENV_MAP = {
    "MUSIC_ROOT": "PLOC_MUSIC_ROOT",
    "OUTPUT_DIR": "PLOC_OUTPUT_DIR",
    "OUTPUT_FORMAT": "PLOC_OUTPUT_FORMAT",
    "OUTPUT_EXTENSION": "PLOC_OUTPUT_EXTENSION",
    "JOBS": "PLOC_JOBS",
    "FULL_OVERLAP_SCORING": "PLOC_FULL_OVERLAP_SCORING",
}

_TRUTHY = {"1", "true", "yes", "on"}


def _load_user_file(config_file: Path = CONFIG_FILE) -> Dict[str, Any]:
    if not config_file.exists():
        return DEFAULTS.copy()
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_file, e)
        data = {}
    if not isinstance(data, dict):
        data = {}
    # ensure keys exist
    for k, v in DEFAULTS.items():
        data.setdefault(k, v)
    return data


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(cfg)
    for key, env_name in ENV_MAP.items():
        val = os.getenv(env_name)
        if val is None:
            continue
        if key == "JOBS":
            try:
                out[key] = int(val)
            except ValueError:
                pass  # ignore bad env and keep existing
        elif key == "FULL_OVERLAP_SCORING":
            out[key] = val.strip().lower() in _TRUTHY
        else:
            out[key] = val or None
    return out


def _coerce_types(eff: Dict[str, Any]) -> Dict[str, Any]:
    eff["MUSIC_ROOT"] = Path(str(eff["MUSIC_ROOT"])).expanduser()
    eff["OUTPUT_DIR"] = Path(str(eff["OUTPUT_DIR"])).expanduser()
    fmt = str(eff.get("OUTPUT_FORMAT") or "").strip().lower()
    eff["OUTPUT_FORMAT"] = fmt if fmt in OUTPUT_FORMATS else DEFAULTS["OUTPUT_FORMAT"]
    ext = eff.get("OUTPUT_EXTENSION")
    if ext:
        ext = str(ext).lstrip(".")
    eff["OUTPUT_EXTENSION"] = ext or None
    try:
        eff["JOBS"] = max(1, int(eff["JOBS"]))
    except (TypeError, ValueError):
        eff["JOBS"] = DEFAULTS["JOBS"]
    flag = eff.get("FULL_OVERLAP_SCORING")
    if isinstance(flag, str):
        flag = flag.strip().lower() in _TRUTHY
    eff["FULL_OVERLAP_SCORING"] = bool(flag)
    return eff


def load_config(config_file: Path = CONFIG_FILE) -> Dict[str, Any]:
    """Load effective config: env > file > defaults, coerced to expected types."""
    file_cfg = _load_user_file(config_file)
    merged = DEFAULTS | file_cfg
    merged = _apply_env_overrides(merged)
    return _coerce_types(merged)


# Exposed module-level config used by the CLI
config = load_config()

"""Tests for configuration loading and precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from playlist_localizer.config import DEFAULTS, ENV_MAP, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for env_name in ENV_MAP.values():
        monkeypatch.delenv(env_name, raising=False)


def test_defaults_without_file(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.json")
    assert cfg["MUSIC_ROOT"] == Path(DEFAULTS["MUSIC_ROOT"])
    assert cfg["OUTPUT_FORMAT"] == "m3u"
    assert cfg["OUTPUT_EXTENSION"] is None
    assert cfg["JOBS"] == 1
    assert cfg["FULL_OVERLAP_SCORING"] is False


def test_file_values_are_coerced(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "MUSIC_ROOT": "~/Library/Music",
                "OUTPUT_FORMAT": "EXTM3U",
                "OUTPUT_EXTENSION": ".m3u8",
                "JOBS": "3",
                "FULL_OVERLAP_SCORING": "true",
            }
        )
    )
    cfg = load_config(config_file)
    assert cfg["MUSIC_ROOT"] == Path.home() / "Library" / "Music"
    assert cfg["OUTPUT_FORMAT"] == "extm3u"
    assert cfg["OUTPUT_EXTENSION"] == "m3u8"
    assert cfg["JOBS"] == 3
    assert cfg["FULL_OVERLAP_SCORING"] is True


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"OUTPUT_DIR": "/from/file", "JOBS": 2}))
    monkeypatch.setenv("PLOC_OUTPUT_DIR", "/from/env")
    monkeypatch.setenv("PLOC_JOBS", "4")
    monkeypatch.setenv("PLOC_FULL_OVERLAP_SCORING", "yes")

    cfg = load_config(config_file)

    assert cfg["OUTPUT_DIR"] == Path("/from/env")
    assert cfg["JOBS"] == 4
    assert cfg["FULL_OVERLAP_SCORING"] is True


def test_bad_values_fall_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"OUTPUT_FORMAT": "pls", "JOBS": 5}))
    monkeypatch.setenv("PLOC_JOBS", "many")

    cfg = load_config(config_file)

    assert cfg["OUTPUT_FORMAT"] == "m3u"
    assert cfg["JOBS"] == 5


def test_corrupt_file_uses_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")
    cfg = load_config(config_file)
    assert cfg["OUTPUT_DIR"] == Path(DEFAULTS["OUTPUT_DIR"])


def test_default_output_dir_is_outside_music_root(tmp_path: Path) -> None:
    """Writing to the defaults must not land next to the source playlists."""
    cfg = load_config(tmp_path / "missing.json")
    assert not cfg["OUTPUT_DIR"].is_relative_to(cfg["MUSIC_ROOT"])

"""
Best-effort audio tag reading for extended playlists.

Only title, artist and duration are needed. Anything mutagen cannot read
falls back to empty strings and a zero duration; tag problems never stop a
playlist from being written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Union

from mutagen import File as MutagenFile
from mutagen import MutagenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SongMetadata:
    title: str = ""
    artist: str = ""
    duration: int = 0  # seconds


MetadataReader = Callable[[Union[str, Path]], SongMetadata]


def _first_tag(audio: Any, key: str) -> str:
    try:
        values = audio.get(key)
    except (KeyError, ValueError):
        return ""
    if not values:
        return ""
    if isinstance(values, (list, tuple)):
        values = values[0]
    return str(values).strip()


def read_song_metadata(path: Union[str, Path]) -> SongMetadata:
    """Read title, artist and duration from an audio file's tags."""
    try:
        audio = MutagenFile(str(path), easy=True)
    except MutagenError as e:
        logger.debug("No readable tags in %s: %s", path, e)
        return SongMetadata()
    except Exception as e:
        # damaged files surface as struct/OS/value errors from the format parsers
        logger.debug("Error reading tags from %s: %s", path, e)
        return SongMetadata()
    if audio is None:
        logger.debug("Unsupported audio format: %s", path)
        return SongMetadata()

    info = getattr(audio, "info", None)
    length = getattr(info, "length", 0) or 0
    return SongMetadata(
        title=_first_tag(audio, "title"),
        artist=_first_tag(audio, "artist"),
        duration=max(0, int(length)),
    )

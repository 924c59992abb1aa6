import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

# Directive lines of the extended M3U format (#EXTM3U, #EXTINF:...)
EXT_MARKER = "#EXT"


def normalize_separators(reference: str, sep: str = os.sep) -> str:
    """Translate both separator styles in a playlist entry to ``sep``."""
    other = "\\" if sep == "/" else "/"
    return reference.replace(other, sep)


def extract_references(text: str, sep: str = os.sep) -> list[str]:
    """
    Parses playlist text into the ordered list of referenced paths.

    Every line not starting with the extended-format marker is kept verbatim,
    blank lines included; nothing is checked against the filesystem.
    """
    return [
        normalize_separators(line, sep)
        for line in text.splitlines()
        if not line.startswith(EXT_MARKER)
    ]


def read_playlist_text(playlist_path: Union[str, Path]) -> str:
    """
    Reads a playlist file as UTF-8, tolerating a byte order mark.

    Raises:
        OSError: If the file cannot be opened or read
        UnicodeDecodeError: If the content is not UTF-8
    """
    with open(playlist_path, "r", encoding="utf-8-sig") as f:
        return f.read()


def read_references(playlist_path: Union[str, Path], sep: str = os.sep) -> list[str]:
    """Reads a playlist file; unreadable files yield no references."""
    try:
        text = read_playlist_text(playlist_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read playlist %s: %s", playlist_path, e)
        return []
    return extract_references(text, sep)

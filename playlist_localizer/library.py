"""
Discovers the local music library and indexes it for reference resolution.

The scanner walks a music root and classifies every regular file by its raw
extension into music files and playlist files. The music files are then
grouped by stem into a LocalIndex, which owns the canonical path storage for
the whole run:

- LocalIndex.build: single pass, per-stem insertion order preserved
- LocalIndex.candidates: arena positions of every file sharing a stem
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Extensions are matched case-sensitively on the raw extension string
MUSIC_EXTENSIONS = frozenset({"aac", "flac", "m4a", "m4b", "mp3", "ogg", "opus"})
PLAYLIST_EXTENSIONS = frozenset({"m3u"})


################################################################################
# FILE NAMES
################################################################################


def split_name(name: str) -> Tuple[str, Optional[str]]:
    """Split a file name into (stem, extension).

    The extension is None when the name has no embedded dot or when its only
    dot is the leading one (".hidden"). "song." has stem "song" and an empty
    extension. The directory entries "." and ".." have neither stem nor
    extension.
    """
    if name in (".", ".."):
        return "", None
    dot = name.rfind(".")
    if dot <= 0:
        return name, None
    return name[:dot], name[dot + 1 :]


def file_stem(path: Union[str, PurePath]) -> str:
    return split_name(PurePath(path).name)[0]


def file_extension(path: Union[str, PurePath]) -> Optional[str]:
    return split_name(PurePath(path).name)[1]


################################################################################
# DIRECTORY SCAN
################################################################################


@dataclass
class LibraryScan:
    """Files discovered under a music root, in walk order."""

    root: Path
    music: List[Path] = field(default_factory=list)
    playlists: List[Path] = field(default_factory=list)


Scanner = Callable[[Path], LibraryScan]


def resolve_root(root: Union[str, Path]) -> Path:
    """
    Canonicalize the music root.

    Raises:
        OSError: If the root does not exist or is not a directory
    """
    path = Path(root).expanduser()
    try:
        resolved = path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise OSError(f"Music root does not exist: {path}") from e
    if not resolved.is_dir():
        raise OSError(f"Music root is not a directory: {resolved}")
    return resolved


def _walk_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # os.walk order is filesystem dependent; sort so index order is stable
        dirnames.sort()
        for name in sorted(filenames):
            file_path = Path(dirpath) / name
            try:
                if not file_path.is_file():
                    continue
            except OSError:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Cannot access file %s", file_path)
                continue
            yield file_path


def scan_library(
    root: Union[str, Path],
    music_extensions: Iterable[str] = MUSIC_EXTENSIONS,
    playlist_extensions: Iterable[str] = PLAYLIST_EXTENSIONS,
) -> LibraryScan:
    """
    Scan a music root for music and playlist files.

    Args:
        root: Music root directory; expanded and canonicalized first.
        music_extensions: Raw extensions classified as music.
        playlist_extensions: Raw extensions classified as playlists.

    Returns:
        LibraryScan: Absolute paths of every classified file.

    Raises:
        OSError: If the root is missing or not a directory
    """
    abs_root = resolve_root(root)
    music_exts = frozenset(music_extensions)
    playlist_exts = frozenset(playlist_extensions)

    scan = LibraryScan(root=abs_root)
    for file_path in _walk_files(abs_root):
        ext = file_extension(file_path)
        if ext in music_exts:
            scan.music.append(file_path)
        elif ext in playlist_exts:
            scan.playlists.append(file_path)

    logger.info(
        "Scanned %s: %d music files, %d playlists",
        abs_root,
        len(scan.music),
        len(scan.playlists),
    )
    return scan


################################################################################
# LOCAL INDEX
################################################################################


class LocalIndex:
    """Stem -> candidate mapping over an arena of local file paths.

    Every path is stored once in ``files``; the stem map only holds positions
    into it, so resolved songs are the very objects the index owns.
    """

    def __init__(self) -> None:
        self.files: List[Path] = []
        self._by_stem: Dict[str, List[int]] = {}
        self._positions: Dict[Path, int] = {}

    @classmethod
    def build(cls, files: Iterable[Union[str, Path]]) -> "LocalIndex":
        index = cls()
        for f in files:
            index.add(f)
        logger.debug("Indexed %d files under %d stems", len(index), len(index._by_stem))
        return index

    def add(self, file: Union[str, Path]) -> Optional[int]:
        """Add a file and return its position, or None if it has no usable stem."""
        path = Path(file)
        if path in self._positions:
            return self._positions[path]
        stem = file_stem(path)
        if not path.name or not stem:
            return None
        position = len(self.files)
        self.files.append(path)
        self._positions[path] = position
        self._by_stem.setdefault(stem, []).append(position)
        return position

    def candidates(self, stem: str) -> Tuple[int, ...]:
        return tuple(self._by_stem.get(stem, ()))

    def stems(self) -> List[str]:
        return list(self._by_stem)

    def __getitem__(self, position: int) -> Path:
        return self.files[position]

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, stem: object) -> bool:
        return bool(self._by_stem.get(stem))  # type: ignore[arg-type]

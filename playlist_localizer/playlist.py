import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .library import LocalIndex
from .metadata import MetadataReader, read_song_metadata
from .resolver import resolve

logger = logging.getLogger(__name__)

EXTM3U_HEADER = "#EXTM3U"
EXTINF_PATTERN = "#EXTINF:{duration},{artist} - {title}"
DEFAULT_EXTENSION = "m3u"


def output_path(directory: Union[str, Path], name: str, extension: Optional[str] = None) -> Path:
    """Where a playlist called ``name`` is written inside ``directory``."""
    ext = (extension or DEFAULT_EXTENSION).lstrip(".")
    return Path(directory) / f"{name}.{ext}"


@dataclass
class Playlist:
    """A named, ordered list of resolved local songs."""

    name: str
    songs: List[Path] = field(default_factory=list)

    def add(self, song: Path) -> None:
        self.songs.append(song)

    def to_m3u(self) -> str:
        return "".join(f"{song}\n" for song in self.songs)

    def to_extm3u(self, read_metadata: MetadataReader = read_song_metadata) -> str:
        lines = [EXTM3U_HEADER]
        for song in self.songs:
            meta = read_metadata(song)
            lines.append(
                EXTINF_PATTERN.format(
                    duration=meta.duration, artist=meta.artist, title=meta.title
                )
            )
            lines.append(str(song))
        return "\n".join(lines) + "\n"

    def render(self, fmt: str = "m3u", read_metadata: MetadataReader = read_song_metadata) -> str:
        if fmt == "extm3u":
            return self.to_extm3u(read_metadata)
        return self.to_m3u()

    def write_to(
        self,
        directory: Union[str, Path],
        fmt: str = "m3u",
        extension: Optional[str] = None,
        read_metadata: MetadataReader = read_song_metadata,
    ) -> Path:
        """
        Write the playlist as ``<directory>/<name>.<extension>``.

        Raises:
            OSError: If the file cannot be written
        """
        file_path = output_path(directory, self.name, extension)
        content = self.render(fmt, read_metadata)
        # undecodable file names come back from os.walk as surrogate escapes
        with open(file_path, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write(content)
        logger.info("Wrote %d songs to %s", len(self.songs), file_path)
        return file_path


def assemble_playlist(
    index: LocalIndex,
    references: Iterable[str],
    name: str,
    full_overlap: bool = False,
) -> Playlist:
    """Resolve references in order; unresolved ones are dropped."""
    playlist = Playlist(name)
    total = 0
    for reference in references:
        total += 1
        song = resolve(index, reference, full_overlap=full_overlap)
        if song is None:
            logger.debug("No local match for %r in %s", reference, name)
            continue
        playlist.add(song)
    logger.info("Playlist %s: resolved %d of %d references", name, len(playlist.songs), total)
    return playlist

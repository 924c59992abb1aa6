"""
Runs the whole relocation: scan the music root, index the music files, then
rewrite every playlist found under the root into the output directory.

Per-playlist problems are recorded on the outcome and never stop the run;
only an unusable music root is fatal.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .library import LibraryScan, LocalIndex, Scanner, file_stem, scan_library
from .metadata import MetadataReader, read_song_metadata
from .playlist import assemble_playlist, output_path
from .references import extract_references, read_playlist_text

logger = logging.getLogger(__name__)


@dataclass
class PlaylistOutcome:
    source: Path
    name: str
    references: int = 0
    resolved: int = 0
    output: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LocalizeReport:
    root: Path
    output_dir: Path
    indexed: int = 0
    outcomes: List[PlaylistOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[PlaylistOutcome]:
        return [o for o in self.outcomes if not o.ok]


def _same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return a.resolve() == b.resolve()


def localize_playlist(
    index: LocalIndex,
    playlist_path: Path,
    output_dir: Path,
    fmt: str = "m3u",
    extension: Optional[str] = None,
    full_overlap: bool = False,
    read_metadata: MetadataReader = read_song_metadata,
) -> PlaylistOutcome:
    """
    Resolve and write a single playlist.

    Read and write errors end up on the outcome. An unreadable playlist is
    still written, with no songs. A playlist is never written over itself.
    """
    name = file_stem(playlist_path)
    outcome = PlaylistOutcome(source=playlist_path, name=name)
    target = output_path(output_dir, name, extension)
    if _same_file(target, playlist_path):
        logger.error("Refusing to overwrite source playlist %s", playlist_path)
        outcome.error = f"output would overwrite the source playlist {playlist_path}"
        return outcome

    try:
        references = extract_references(read_playlist_text(playlist_path))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read playlist %s: %s", playlist_path, e)
        outcome.error = f"could not read playlist: {e}"
        references = []
    outcome.references = len(references)

    playlist = assemble_playlist(index, references, name, full_overlap=full_overlap)
    outcome.resolved = len(playlist.songs)
    try:
        outcome.output = playlist.write_to(output_dir, fmt, extension, read_metadata)
    except (OSError, UnicodeError) as e:
        logger.error("Couldn't write playlist %s: %s", name, e)
        outcome.error = str(e)
    return outcome


def localize(
    root: Union[str, Path],
    output_dir: Union[str, Path],
    fmt: str = "m3u",
    extension: Optional[str] = None,
    jobs: int = 1,
    full_overlap: bool = False,
    scanner: Scanner = scan_library,
    read_metadata: MetadataReader = read_song_metadata,
    on_outcome: Optional[Callable[[PlaylistOutcome], None]] = None,
) -> LocalizeReport:
    """
    Relocate every playlist under ``root`` into ``output_dir``.

    Args:
        root: Music root to scan for music and playlist files.
        output_dir: Directory receiving the rewritten playlists.
        fmt: "m3u" or "extm3u".
        extension: Output file extension, "m3u" when None.
        jobs: Worker threads used for playlists; the index is shared read-only.
        full_overlap: Score perfect suffix matches by their overlap length.
        scanner: Directory scan capability, replaceable in tests.
        read_metadata: Tag reader used by the extended format.
        on_outcome: Called once per playlist as it finishes.

    Returns:
        LocalizeReport: Outcomes in playlist discovery order.

    Raises:
        OSError: If the root is not a usable directory
    """
    scan: LibraryScan = scanner(Path(root))
    index = LocalIndex.build(scan.music)
    out_dir = Path(output_dir).expanduser()
    report = LocalizeReport(root=scan.root, output_dir=out_dir, indexed=len(index))

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # Each write will fail and be reported on its own outcome
        logger.warning("Failed to create output directory %s: %s", out_dir, e)
    if out_dir.resolve().is_relative_to(scan.root):
        logger.warning("Output directory %s is inside the music root %s", out_dir, scan.root)

    # Playlists with the same stem would write the same output file; first one wins
    claimed: Dict[Path, Path] = {}
    for playlist_path in scan.playlists:
        claimed.setdefault(output_path(out_dir, file_stem(playlist_path), extension), playlist_path)

    def work(playlist_path: Path) -> PlaylistOutcome:
        owner = claimed[output_path(out_dir, file_stem(playlist_path), extension)]
        if owner != playlist_path:
            logger.error("Skipping %s: its output name is already used by %s", playlist_path, owner)
            outcome = PlaylistOutcome(
                source=playlist_path,
                name=file_stem(playlist_path),
                error=f"output name already used by {owner}",
            )
        else:
            outcome = localize_playlist(
                index, playlist_path, out_dir, fmt, extension, full_overlap, read_metadata
            )
        if on_outcome is not None:
            on_outcome(outcome)
        return outcome

    if jobs > 1 and len(scan.playlists) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            report.outcomes = list(executor.map(work, scan.playlists))
    else:
        report.outcomes = [work(p) for p in scan.playlists]

    logger.info(
        "Localized %d playlists (%d failed) against %d indexed files",
        len(report.outcomes),
        len(report.failed),
        report.indexed,
    )
    return report

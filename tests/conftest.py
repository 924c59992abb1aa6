from pathlib import Path

import pytest

from playlist_localizer.metadata import SongMetadata


def make_files(root: Path, relpaths, content: str = "x") -> list[Path]:
    """Create every relative path under root and return the absolute paths."""
    created = []
    for rel in relpaths:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        created.append(p)
    return created


@pytest.fixture
def music_root(tmp_path: Path) -> Path:
    """A small library with one foreign playlist referencing it from another machine."""
    root = tmp_path / "Music"
    make_files(
        root,
        [
            "Artist/Album/Track.mp3",
            "A/Song.mp3",
            "B/Song.flac",
            "Artist/Album/cover.jpg",
        ],
    )
    (root / "Playlists").mkdir()
    (root / "Playlists" / "Road Trip.m3u").write_text(
        "#EXTM3U\n"
        "#EXTINF:200,Artist - Track\n"
        "C:\\OldLib\\Artist\\Album\\Track.mp3\n"
        "#EXTINF:180,Someone - Missing\n"
        "/mnt/old/Missing.mp3\n"
        "/mnt/old/B/Song.flac\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def fake_metadata():
    """Tag reader that never touches the file."""

    def read(path):
        return SongMetadata(title=Path(path).stem, artist="Artist", duration=120)

    return read

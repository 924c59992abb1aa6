"""Tests for reading playlist entries."""

from __future__ import annotations

from pathlib import Path

from playlist_localizer.references import (
    extract_references,
    normalize_separators,
    read_references,
)


def test_directive_lines_are_skipped() -> None:
    text = "#EXTM3U\n#EXTINF:120,X - Y\nsong.mp3\n"
    assert extract_references(text, sep="/") == ["song.mp3"]


def test_other_lines_are_kept_verbatim() -> None:
    """Blank lines and plain comments are not filtered, only #EXT directives."""
    text = "a.mp3\n\n# just a note\n#EXTINF:1,A - B\nb.mp3"
    assert extract_references(text, sep="/") == ["a.mp3", "", "# just a note", "b.mp3"]


def test_separators_normalized_to_host_convention() -> None:
    assert normalize_separators("C:\\OldLib\\Artist\\Track.mp3", sep="/") == "C:/OldLib/Artist/Track.mp3"
    assert normalize_separators("music/Artist/Track.mp3", sep="\\") == "music\\Artist\\Track.mp3"
    assert extract_references("x\\y/z.mp3\r\n", sep="/") == ["x/y/z.mp3"]


def test_extraction_is_idempotent() -> None:
    text = "#EXTM3U\n/a/b.mp3\nc\\d.flac\n"
    assert extract_references(text) == extract_references(text)


def test_read_references_from_file(tmp_path: Path) -> None:
    playlist = tmp_path / "list.m3u"
    playlist.write_bytes("\ufeff#EXTM3U\r\n/mnt/Ünïcode/song.mp3\r\n".encode("utf-8"))
    assert read_references(playlist, sep="/") == ["/mnt/Ünïcode/song.mp3"]


def test_missing_playlist_yields_nothing(tmp_path: Path) -> None:
    assert read_references(tmp_path / "nope.m3u") == []


def test_undecodable_playlist_yields_nothing(tmp_path: Path) -> None:
    playlist = tmp_path / "latin1.m3u"
    playlist.write_bytes(b"/music/caf\xe9.mp3\n")
    assert read_references(playlist) == []


def test_empty_playlist(tmp_path: Path) -> None:
    playlist = tmp_path / "empty.m3u"
    playlist.write_text("")
    assert read_references(playlist) == []

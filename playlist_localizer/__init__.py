"""
playlist_localizer: make portable playlists point at your local music library.

This package provides:
- Scanning a music root and indexing its audio files by file name.
- Reading the entries of plain and extended M3U playlists.
- Resolving each entry to the local file sharing its name whose folders best
  agree with the entry's path.
- Writing the relocated playlists as plain or extended M3U.
"""

__version__ = "1.0.0"

"""
Main entry point for the playlist_localizer application.

This file allows the package to be executed as a script, e.g., by running `python -m playlist_localizer`.
It imports the `main` function from the `cli` module and invokes it.
"""

from .cli import main

if __name__ == "__main__":
    main()

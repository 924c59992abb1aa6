import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from click.shell_completion import get_completion_class
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import config, console
from .localizer import LocalizeReport, PlaylistOutcome, localize

PROG_NAME = "playlist_localizer"
COMPLETE_VAR = "_PLAYLIST_LOCALIZER_COMPLETE"

app = typer.Typer(
    help="Point playlist entries at the matching files of your local music library.",
    add_completion=False,
)

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    m3u = "m3u"
    extm3u = "extm3u"


class Shell(str, Enum):
    bash = "bash"
    zsh = "zsh"
    fish = "fish"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def completion_script(shell: str) -> str:
    """Render the shell completion script for this command."""
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        raise typer.BadParameter(f"Unsupported shell: {shell}")
    command = typer.main.get_command(app)
    return comp_cls(command, {}, PROG_NAME, COMPLETE_VAR).source()


def _print_summary(report: LocalizeReport) -> None:
    table = Table(title=f"Playlists relocated against {report.indexed} local files")
    table.add_column("Playlist", style="cyan")
    table.add_column("Resolved", justify="right")
    table.add_column("Output")
    for outcome in report.outcomes:
        resolved = f"{outcome.resolved}/{outcome.references}"
        if outcome.ok:
            table.add_row(escape(outcome.name), f"[green]{resolved}[/green]", escape(str(outcome.output)))
        else:
            table.add_row(escape(outcome.name), f"[red]{resolved}[/red]", f"[red]{escape(outcome.error)}[/red]")
    console.print(table)


@app.command()
def main_command(
    root: Optional[Path] = typer.Option(
        None, "--root", "-r", help="Music root to scan. Defaults to MUSIC_ROOT from the config."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory for the rewritten playlists. Defaults to OUTPUT_DIR from the config.",
    ),
    fmt: Optional[OutputFormat] = typer.Option(
        None, "--format", "-f", help="Output format: plain m3u or extended extm3u."
    ),
    extension: Optional[str] = typer.Option(
        None, "--extension", "-e", help="File extension of the written playlists (default m3u)."
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", min=1, help="Playlists processed in parallel."
    ),
    full_overlap: bool = typer.Option(
        False,
        "--full-overlap",
        help="Score references whose folders fully overlap a candidate's by the overlap length.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    generate_completion: Optional[Shell] = typer.Option(
        None,
        "--generate-completion",
        "-g",
        help="Print a completion script for the given shell and exit.",
    ),
):
    """
    Rewrite every .m3u playlist found under the music root so its entries point
    at local files.

    Entries are matched on identical file names (without extension); when
    several local files share a name, the one whose parent folders agree with
    the entry's for the longest stretch wins, and a matching extension breaks
    ties. Entries without a local match are left out.
    """
    if generate_completion is not None:
        run_options = (root, output, fmt, extension, jobs)
        if full_overlap or verbose or any(v is not None for v in run_options):
            raise typer.BadParameter(
                "--generate-completion cannot be combined with other options",
                param_hint="'--generate-completion'",
            )
        typer.echo(completion_script(generate_completion.value))
        return

    _configure_logging(verbose)

    music_root = root or config["MUSIC_ROOT"]
    output_dir = output or config["OUTPUT_DIR"]
    out_fmt = fmt.value if fmt else config["OUTPUT_FORMAT"]
    out_ext = extension or config["OUTPUT_EXTENSION"]
    workers = jobs or config["JOBS"]
    overlap = full_overlap or config["FULL_OVERLAP_SCORING"]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(description=f"Scanning {escape(str(music_root))}", total=None)
        done = []

        def advance(outcome: PlaylistOutcome) -> None:
            done.append(outcome)
            progress.update(task, description=f"Relocated {len(done)} playlist(s)")

        try:
            report = localize(
                music_root,
                output_dir,
                fmt=out_fmt,
                extension=out_ext,
                jobs=workers,
                full_overlap=overlap,
                on_outcome=advance,
            )
        except OSError as e:
            report = None
            root_error = e

    if report is None:
        console.print(f"[bold red]Invalid music root: {escape(str(root_error))}[/bold red]")
        raise typer.Exit(1)
    if not report.outcomes:
        console.print(f"[yellow]No playlists found under {escape(str(report.root))}[/yellow]")
        return
    _print_summary(report)
    if report.failed:
        console.print(f"[red]{len(report.failed)} playlist(s) could not be written.[/red]")
    else:
        console.print(f"[bold green]✓ Wrote {len(report.outcomes)} playlist(s) to {escape(str(report.output_dir))}[/bold green]")


def main():
    app(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()

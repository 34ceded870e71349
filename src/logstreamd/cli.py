"""Command-line interface for the logstreamd daemon."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Annotated

import typer

from . import __version__
from . import log as logstreamd_log
from .commands import check as check_cmd
from .commands import run as run_cmd
from .commands import scan as scan_cmd

app = typer.Typer(
    help="Keep stream reader workers in line with a directory of TOML files.",
    no_args_is_help=True,
    add_completion=False,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings file with a [logstreamd] table."),
]
DirOption = Annotated[
    Path | None,
    typer.Option("--dir", help="Directory tree of stream reader files."),
]
ShareDirOption = Annotated[
    Path | None,
    typer.Option("--share-dir", help="Base for resolving a relative --dir."),
]
WorkerFactoryOption = Annotated[
    str | None,
    typer.Option("--worker-factory", help="Worker factory as 'module:attr'."),
]


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in logstreamd_log.LEVEL_NAMES:
        allowed = ", ".join(logstreamd_log.LEVEL_NAMES)
        raise typer.BadParameter(f"expected one of: {allowed}")
    return normalized


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"logstreamd {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            callback=_validate_log_level,
            help="Log level: trace, debug, info, success, warning, error.",
        ),
    ] = None,
    no_color: Annotated[
        bool, typer.Option("--no-color", help="Disable colored log output.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_show_version, is_eager=True, help="Show the version and exit."
        ),
    ] = False,
) -> None:
    """Global options."""
    if log_level is not None:
        logstreamd_log.set_level(log_level)
    if no_color:
        logstreamd_log.set_no_color(True)


@app.command("run")
def run(
    config: ConfigOption = None,
    directory: DirOption = None,
    interval: Annotated[
        int | None,
        typer.Option("--interval", min=1, help="Seconds between rescans."),
    ] = None,
    share_dir: ShareDirOption = None,
    worker_factory: WorkerFactoryOption = None,
    max_workers: Annotated[
        int | None,
        typer.Option("--max-workers", min=1, help="Cap on concurrently running workers."),
    ] = None,
    timestamps: Annotated[
        bool,
        typer.Option("--timestamps/--no-timestamps", help="Prefix log lines with the time."),
    ] = True,
) -> None:
    """Scan and reconcile until interrupted."""
    run_cmd.run_daemon(
        SimpleNamespace(
            config=config,
            dir=directory,
            interval=interval,
            share_dir=share_dir,
            worker_factory=worker_factory,
            max_workers=max_workers,
            timestamps=timestamps,
        )
    )


@app.command("scan")
def scan(
    config: ConfigOption = None,
    directory: DirOption = None,
    share_dir: ShareDirOption = None,
) -> None:
    """List the workers the directory declares without starting them."""
    scan_cmd.scan_once(SimpleNamespace(config=config, dir=directory, share_dir=share_dir))


@app.command("check")
def check(
    path: Annotated[Path, typer.Argument(help="Stream reader file to validate.")],
) -> None:
    """Print the prepared configuration of one stream reader file."""
    check_cmd.check_file(SimpleNamespace(path=path))


def main() -> None:
    app()


if __name__ == "__main__":
    main()

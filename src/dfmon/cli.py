from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from dfmon import __version__, console
from dfmon.cancel import CancelToken, install_signal_handlers, restore_signal_handlers
from dfmon.collectors.mounts import ensure_mount_table, filter_mounts, read_mounts
from dfmon.collectors.usage import analyze
from dfmon.config import apply_overrides, dump_config, load_config
from dfmon.errors import DfmonError
from dfmon.render import render
from dfmon.sorting import SortKey, sort_stats

app = typer.Typer(
    add_completion=False,
    # -h is "human readable", like df
    context_settings={"help_option_names": ["--help"]},
    epilog="Thresholds and defaults can also be set in ~/.config/dfmon/config.yaml.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dfmon {__version__}")
        raise typer.Exit()


@app.command()
def main(
    show_all: bool = typer.Option(False, "-a", "--all", help="Show all filesystems (currently no effect)."),
    human_readable: Optional[bool] = typer.Option(
        None,
        "-h/-H",
        "--human-readable/--raw",
        help="Human readable sizes in table output (default: on).",
    ),
    output: Optional[str] = typer.Option(None, "-o", "--output", help="Output format: table, json, csv."),
    sort: Optional[str] = typer.Option(None, "-s", "--sort", help="Sort by: mount, usage, size."),
    exclude: Optional[str] = typer.Option(
        None, "-x", "--exclude", help="Comma-separated filesystem types to exclude."
    ),
    warn: Optional[float] = typer.Option(None, "-w", "--warn", help="Warning threshold in percent (default: 70)."),
    crit: Optional[float] = typer.Option(None, "-c", "--crit", help="Critical threshold in percent (default: 90)."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML)."),
    show_config: bool = typer.Option(False, "--show-config", help="Print the effective config as YAML and exit."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Show disk usage of mounted filesystems (Linux)."""
    try:
        cfg = load_config(config_path)
    except DfmonError as e:
        console.log(str(e))
        raise typer.Exit(code=1)

    cfg = apply_overrides(
        cfg,
        show_all=show_all or None,
        human_readable=human_readable,
        output=output,
        sort=sort,
        exclude=exclude,
        warn_threshold=warn,
        crit_threshold=crit,
        no_color=no_color or None,
    )

    if show_config:
        typer.echo(dump_config(cfg), nl=False)
        raise typer.Exit()

    token = CancelToken()
    previous = install_signal_handlers(token)
    try:
        try:
            ensure_mount_table()
            mounts = read_mounts()
        except DfmonError as e:
            console.log(str(e))
            raise typer.Exit(code=1)

        stats = analyze(filter_mounts(mounts, cfg.exclude), cancel=token)
    finally:
        restore_signal_handlers(previous)

    text = render(sort_stats(stats, SortKey.parse(cfg.sort)), cfg)
    if text:
        typer.echo(text, nl=False, color=not cfg.no_color)


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()

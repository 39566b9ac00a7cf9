from __future__ import annotations

import typer


PREFIX = "[dfmon]"


def log(message: str) -> None:
    """Diagnostic line on stderr. stdout is reserved for the report."""
    typer.echo(f"{PREFIX} {message}", err=True)

"""Built-in CLI sub-commands for specscout.

Each module defines either a standalone command function or a Typer
sub-application, registered on the root app in :func:`specscout.app.main`:

* :mod:`~specscout.commands.query` -- ``endpoint``, ``files``, ``search``.
* :mod:`~specscout.commands.serve` -- ``serve`` (MCP server over stdio).
* :mod:`~specscout.commands.config` -- ``config show|set|path``.
"""

from __future__ import annotations

from typing import Optional

import typer

from specscout.exceptions import SpecscoutError
from specscout.models import GlobalConfig
from specscout.output import error


def resolve_from_context(ctx: Optional[typer.Context]) -> GlobalConfig:
    """Resolve the effective configuration using the root command's flags.

    Raises:
        typer.Exit: With the error's exit code when configuration fails.
    """
    from specscout.config import resolve_config

    obj = (ctx.obj if ctx is not None else None) or {}
    try:
        return resolve_config(
            cli_dir=obj.get("dir"),
            cli_bucket=obj.get("bucket"),
            cli_endpoint=obj.get("endpoint"),
            cli_log_level="debug" if obj.get("verbose") else None,
        )
    except SpecscoutError as exc:
        error(f"Config error: {exc}")
        raise typer.Exit(code=exc.exit_code) from None


def fail(exc: SpecscoutError) -> typer.Exit:
    """Report *exc* on stderr and return the matching ``typer.Exit``."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)

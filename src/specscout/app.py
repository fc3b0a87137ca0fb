"""The ``specscout`` command line.

The root callback reads the flags shared by every command: where the
documents live (``--dir`` / ``--bucket`` / ``--endpoint``) and how output
looks (``--json``, ``--plain``, ``--no-color``, ``--quiet``,
``--verbose``). It installs the global
:class:`~specscout.output.OutputManager` and leaves the source flags in
``ctx.obj`` for :func:`specscout.commands.resolve_from_context`.

:func:`main` is the console-script entry point. A
:class:`~specscout.exceptions.SpecscoutError` that escapes a command ends
the process with that error's exit code; any other exception is written
to a crash log under :func:`~specscout.config.get_data_dir`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from specscout import __version__
from specscout.exit_codes import EXIT_GENERIC_FAILURE
from specscout.output import OutputFormat

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specscout",
    help="Look up endpoint details in OpenAPI/Swagger YAML documents, or serve them over MCP.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"specscout {__version__}")
        raise typer.Exit()


def _output_format(json_output: bool, plain_output: bool) -> OutputFormat:
    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Print the version and exit."
    ),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Read YAML documents from this directory."
    ),
    bucket: Optional[str] = typer.Option(
        None, "--bucket", "-b", help="Read YAML documents from this S3 bucket."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="S3-compatible endpoint URL (MinIO, LocalStack, ...)."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print results as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Turn off colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug details."),
) -> None:
    """Look up endpoint details in OpenAPI/Swagger YAML documents."""
    from specscout.output import OutputManager, set_output

    set_output(
        OutputManager(
            format=_output_format(json_output, plain_output),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    ctx.ensure_object(dict)
    ctx.obj.update(dir=directory, bucket=bucket, endpoint=endpoint, verbose=verbose)


def register_commands() -> None:
    """Attach the sub-commands to :data:`app`; calling it again is a no-op."""
    from specscout.commands.config import config_app
    from specscout.commands.query import endpoint_command, files_command, search_command
    from specscout.commands.serve import serve_command

    if any(info.name == "serve" for info in app.registered_commands):
        return

    app.command("serve")(serve_command)
    app.command("endpoint")(endpoint_command)
    app.command("files")(files_command)
    app.command("search")(search_command)
    app.add_typer(config_app, name="config", help="Show or change the stored configuration.")


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> Path:
    """Save the traceback being handled to ``<data dir>/logs/crash-<time>.log``."""
    from specscout.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return log_path


def main() -> None:
    """Console-script entry point; always ends in ``SystemExit``."""
    from specscout.exceptions import SpecscoutError
    from specscout.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _on_sigint(signal.SIGINT, None)
    except SpecscoutError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)

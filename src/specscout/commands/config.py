"""Config commands -- view and modify the user configuration.

Provides the ``specscout config`` sub-command group. ``show`` prints the
effective configuration after every layer (file, project, environment,
flags) is applied; ``set`` edits the persisted user file.
"""

from __future__ import annotations

import typer

from specscout.commands import fail, resolve_from_context
from specscout.exceptions import SpecscoutError
from specscout.output import format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)

_SECRET_KEYS = ("secret_access_key", "session_token")


def _masked(data: dict) -> dict:
    source = dict(data.get("source", {}))
    for key in _SECRET_KEYS:
        if source.get(key):
            source[key] = "****"
    return {**data, "source": source}


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Example::

        specscout config show
        specscout --json config show
    """
    from specscout.config import get_config_dir

    config = resolve_from_context(ctx)
    info(f"Config directory: {get_config_dir()}")
    format_response(_masked(config.model_dump(mode="json")))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'source.bucket')."
    ),
    value: str = typer.Argument(help="Value to set ('null' clears optional keys)."),
) -> None:
    """Set a value in the user configuration file.

    Example::

        specscout config set source.type s3
        specscout config set source.bucket api-docs
        specscout config set scan.responses_lookahead 30
    """
    from specscout.config import load_global_config, save_global_config, set_config_value

    try:
        updated = set_config_value(load_global_config(), key, value)
    except SpecscoutError as exc:
        raise fail(exc) from None

    save_global_config(updated)
    success(f"Set {key} = {value}")


@config_app.command("path")
def config_path() -> None:
    """Print the path of the user configuration file."""
    from specscout.config import global_config_path

    print_data(str(global_config_path()))

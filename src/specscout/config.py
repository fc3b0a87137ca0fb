"""Where specscout keeps its settings, and how the effective settings are built.

Settings come in four layers, lowest first:

1. the user file ``config.json`` in :func:`get_config_dir`,
2. an optional ``specscout.json`` in the working directory,
3. environment variables (:data:`ENV_VARS`),
4. CLI flags passed to :func:`resolve_config`.

Each layer may hold any subset of :class:`~specscout.models.GlobalConfig`;
missing keys fall through to the layer below and finally to the model
defaults. The user file is only ever replaced whole, through
:func:`_atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specscout.exceptions import ConfigError
from specscout.models import GlobalConfig

_APP_NAME = "specscout"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specscout.json"

# Environment variable -> dotted config key.
ENV_VARS: dict[str, str] = {
    "SPECSCOUT_SOURCE": "source.type",
    "SPECSCOUT_DIR": "source.root",
    "S3_BUCKET": "source.bucket",
    "S3_REGION": "source.region",
    "S3_ENDPOINT": "source.endpoint",
    "AWS_ACCESS_KEY_ID": "source.access_key_id",
    "AWS_SECRET_ACCESS_KEY": "source.secret_access_key",
    "AWS_SESSION_TOKEN": "source.session_token",
    "LOG_LEVEL": "logging.level",
    "SPECSCOUT_SENSITIVE_MARKER": "scan.sensitive_marker",
    "SPECSCOUT_LOOKAHEAD": "scan.responses_lookahead",
}

# XDG variable and its default under $HOME, per directory kind.
_XDG_DIRS: dict[str, tuple[str, tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",)),
    "data": ("XDG_DATA_HOME", (".local", "share")),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    """Resolve and create the *kind* (``config`` or ``data``) directory.

    Linux/BSD follow the XDG base directory variables; other platforms use
    ``~/.specscout`` for config and ``~/.specscout/logs`` for data.
    """
    if _is_xdg_platform():
        env_var, default = _XDG_DIRS[kind]
        base = Path(os.environ.get(env_var) or Path.home().joinpath(*default))
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if kind == "data":
            path = path / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` (``~/.config/specscout`` on Linux)."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory holding crash logs (``~/.local/share/specscout`` on Linux)."""
    return _app_dir("data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a synced temp file in the same directory.

    The temp file is removed if anything goes wrong before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# --- Config files ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def _validate(data: dict[str, Any], origin: str) -> GlobalConfig:
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration from {origin}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The stored :class:`~specscout.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or values.
    """
    path = global_config_path()
    data = _read_json(path, "global config")
    if data is None:
        return GlobalConfig()
    return _validate(data, str(path))


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specscout.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    return _read_json(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


# --- Precedence resolution ---


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated recursively with *overlay*."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_dotted(data: dict[str, Any], dotted: str, value: Any) -> None:
    keys = dotted.split(".")
    target = data
    for k in keys[:-1]:
        target = target.setdefault(k, {})
    target[keys[-1]] = value


def _env_overrides() -> dict[str, Any]:
    """Collect overrides from the environment (empty values are ignored)."""
    overrides: dict[str, Any] = {}
    for var, dotted in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            _set_dotted(overrides, dotted, value)

    # A bucket or a directory given without an explicit type picks the store.
    if not os.environ.get("SPECSCOUT_SOURCE"):
        if os.environ.get("S3_BUCKET"):
            _set_dotted(overrides, "source.type", "s3")
        elif os.environ.get("SPECSCOUT_DIR"):
            _set_dotted(overrides, "source.type", "local")
    return overrides


def resolve_config(
    cli_dir: Optional[str] = None,
    cli_bucket: Optional[str] = None,
    cli_endpoint: Optional[str] = None,
    cli_log_level: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--dir``, ``--bucket``, ``--endpoint``, ``--verbose``)
        2. Environment variables (see :data:`ENV_VARS`)
        3. Project config (``./specscout.json``)
        4. User config (``~/.config/specscout/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer contains invalid JSON or the merged
            result fails validation.
    """
    # 5 + 4. Global file (defaults fill in missing keys)
    data = load_global_config().model_dump(mode="json")

    # 3. Project-local file
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    # 2. Environment
    data = _deep_merge(data, _env_overrides())

    # 1. CLI flags
    cli: dict[str, Any] = {}
    if cli_dir is not None:
        _set_dotted(cli, "source.root", cli_dir)
        _set_dotted(cli, "source.type", "local")
    if cli_bucket is not None:
        _set_dotted(cli, "source.bucket", cli_bucket)
        _set_dotted(cli, "source.type", "s3")
    if cli_endpoint is not None:
        _set_dotted(cli, "source.endpoint", cli_endpoint)
    if cli_log_level is not None:
        _set_dotted(cli, "logging.level", cli_log_level)
    data = _deep_merge(data, cli)

    return _validate(data, "merged configuration")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    The string value is coerced to the type of the current field (bool or
    int); ``null``/``none`` clears an optional field.

    Raises:
        ConfigError: If the key is unknown or the value does not validate.
    """
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            raise ConfigError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        raise ConfigError(f"Unknown config key: {key}")

    current = target[final_key]
    coerced: Any = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise ConfigError(f"Expected integer for {key}, got: {value}") from None
    elif value.lower() in ("null", "none"):
        coerced = None

    target[final_key] = coerced
    return _validate(data, f"'{key}'")

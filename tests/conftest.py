"""Shared fixtures for the specscout test suite."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from specscout.output import OutputFormat, OutputManager, reset_output, set_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output():
    """Drop the global OutputManager and logging setup after every test."""
    yield
    reset_output()
    logger = logging.getLogger("specscout")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


USERS_YAML = """\
openapi: 3.0.0
paths:
  /users:
    get:
      summary: List users
      responses:
        '200':
          description: OK
"""


@pytest.fixture
def cards_yaml() -> str:
    """Raw text of the cards API fixture."""
    return (FIXTURES_DIR / "cards.yaml").read_text(encoding="utf-8")


@pytest.fixture
def users_yaml() -> str:
    """Minimal single-endpoint document."""
    return USERS_YAML


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """A document directory with two YAML files, a nested one and a non-YAML file."""
    root = tmp_path / "docs"
    (root / "team").mkdir(parents=True)
    (root / "cards.yaml").write_text(
        (FIXTURES_DIR / "cards.yaml").read_text(encoding="utf-8"), encoding="utf-8"
    )
    (root / "team" / "users.yml").write_text(USERS_YAML, encoding="utf-8")
    (root / "README.md").write_text("# not a spec\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path, clears every environment variable specscout reads and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    from specscout.config import ENV_VARS

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specscout.config._is_xdg_platform", lambda: True)

    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

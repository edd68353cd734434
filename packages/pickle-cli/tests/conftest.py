"""Shared test fixtures for pickle-cli tests.

Provides CliRunner fixtures and feature file helpers for testing CLI
commands.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

CONFIG_FILENAME = "pickle.yaml"

VALID_CONFIG = """\
pickle:
  packageName: com.example.test
  androidTest:
    enabled: true
    featuresDir: features
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance running inside a temporary directory.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def write_features() -> Callable[[Path], Path]:
    """Return a helper creating login/logout features below a directory."""

    def _write(directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "login.feature").write_text("Scenario: A")
        (directory / "logout.feature").write_text("Scenario: B")
        return directory

    return _write


@pytest.fixture
def write_config() -> Callable[..., Path]:
    """Return a helper writing pickle.yaml (valid by default)."""

    def _write(content: str = VALID_CONFIG, path: Path = Path(CONFIG_FILENAME)) -> Path:
        path.write_text(content)
        return path

    return _write

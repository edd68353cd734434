"""Shared pytest fixtures for pickle-core tests.

This module provides the canonical features directory, host variant fakes
for both merged-assets API shapes, and structlog configuration.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
import structlog

from pickle_core.schemas import PickleConfig

CANONICAL_PACKAGE = "com.example.test"
CANONICAL_CONTENTS = {
    "login.feature": "Scenario: A",
    "logout.feature": "Scenario: B",
}


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def java_hash_reference(text: str) -> int:
    """Straightforward String.hashCode() for BMP-only text."""
    h = 0
    for ch in text:
        h = (31 * h + ord(ch)) & 0xFFFFFFFF
    return h - (1 << 32) if h >= 1 << 31 else h


@pytest.fixture
def java_hash() -> Callable[[str], int]:
    """Return the reference String.hashCode() implementation."""
    return java_hash_reference


@pytest.fixture
def features_dir(tmp_path: Path) -> Path:
    """Create the canonical features directory (login/logout features)."""
    directory = tmp_path / "features"
    directory.mkdir()
    for name, content in CANONICAL_CONTENTS.items():
        (directory / name).write_text(content)
    return directory


@pytest.fixture
def deny_read(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """Return a helper making Path.read_bytes() fail for chosen files."""
    denied: set[Path] = set()
    read_bytes = Path.read_bytes

    def _read_bytes(self: Path) -> bytes:
        if self in denied:
            raise PermissionError(13, "Permission denied", str(self))
        return read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", _read_bytes)
    return denied.add


@pytest.fixture
def canonical_fingerprint() -> int:
    """Fingerprint expected for the canonical features directory."""
    return java_hash_reference("Scenario: AScenario: B")


class FakeProvider:
    """Host provider realized with get()."""

    def __init__(self, value: Any) -> None:
        self._value = value
        self.get_calls = 0

    def get(self) -> Any:
        self.get_calls += 1
        return self._value


class FailingProvider:
    """Provider that cannot be realized."""

    def get(self) -> Any:
        raise RuntimeError("provider has no value")


class FakeVariant:
    """Host variant with optional asset merge accessors."""

    def __init__(self, name: str, dir_name: str | None = None, **accessors: Any) -> None:
        self.name = name
        self.dir_name = dir_name or name
        self.generated_sources: list[tuple[Any, Path]] = []
        for attr, value in accessors.items():
            setattr(self, attr, value)

    def register_java_generating_task(self, task: Any, output_dir: Path) -> None:
        self.generated_sources.append((task, output_dir))


def new_shape_accessors(assets_dir: Path) -> dict[str, Any]:
    """Accessors exposed by newer hosts: provider -> task -> provider -> directory."""
    directory = SimpleNamespace(as_file=assets_dir)
    merge_task = SimpleNamespace(output_dir=FakeProvider(directory))
    return {"merge_assets_provider": FakeProvider(merge_task)}


def old_shape_accessors(assets_dir: Path) -> dict[str, Any]:
    """Accessors exposed by older hosts: task with a plain output_dir."""
    return {"merge_assets": SimpleNamespace(output_dir=assets_dir)}


@pytest.fixture
def make_variant() -> Callable[..., FakeVariant]:
    """Return a factory for fake host variants.

    Args (of the factory):
        name: Variant name.
        assets_dir: Merged assets directory, if the variant exposes one.
        shape: "new", "old", or "none" (no asset merge accessors).
        dir_name: Directory-safe name, defaults to name.
    """

    def _make(
        name: str,
        assets_dir: Path | None = None,
        shape: str = "new",
        dir_name: str | None = None,
    ) -> FakeVariant:
        accessors: dict[str, Any] = {}
        if assets_dir is not None and shape == "new":
            accessors = new_shape_accessors(assets_dir)
        elif assets_dir is not None and shape == "old":
            accessors = old_shape_accessors(assets_dir)
        return FakeVariant(name, dir_name, **accessors)

    return _make


@pytest.fixture
def failing_provider() -> FailingProvider:
    """Provider whose get() raises."""
    return FailingProvider()


@pytest.fixture
def android_config() -> PickleConfig:
    """Configuration with instrumentation tests enabled."""
    return PickleConfig(
        packageName=CANONICAL_PACKAGE,
        androidTest={"enabled": True, "featuresDir": "features"},
    )

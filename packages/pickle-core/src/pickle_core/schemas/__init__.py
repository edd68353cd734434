"""Configuration schemas for pickle-runtime."""

from __future__ import annotations

from pickle_core.schemas.config import (
    ANDROID_TEST_SCOPE,
    UNIT_TEST_SCOPE,
    PickleConfig,
    TestTarget,
)

__all__: list[str] = [
    "PickleConfig",
    "TestTarget",
    "ANDROID_TEST_SCOPE",
    "UNIT_TEST_SCOPE",
]

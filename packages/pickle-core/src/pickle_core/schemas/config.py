"""PickleConfig root model for pickle-runtime.

This module defines the configuration consumed from the host build:

    pickle {
        packageName "com.example.test"
        strictMode true
        androidTest { enabled true; featuresDir "features" }
        unitTest { enabled false }
    }

The same structure can be written as pickle.yaml. Keys are accepted in the
host's camelCase form and in snake_case.

Requirements that only apply once a test target is enabled (featuresDir,
packageName) are checked by require_resolved(), not at model validation,
so a partially configured project can still be loaded and inspected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pickle_core.errors import MissingConfigurationError

# Scope names as they appear in the host DSL
ANDROID_TEST_SCOPE = "androidTest"
UNIT_TEST_SCOPE = "unitTest"


class TestTarget(BaseModel):
    """Per test type configuration block.

    Attributes:
        enabled: Whether hash classes are generated for this test type.
        features_dir: Directory holding .feature files. For instrumentation
            tests it is relative to the merged assets directory; for unit
            tests it is used as given.
    """

    __test__ = False

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    enabled: bool = Field(..., description="Generate hash classes for this test type")
    features_dir: str | None = Field(
        default=None,
        min_length=1,
        description="Directory containing .feature files",
    )

    def require_features_dir(self, scope: str, file_path: str | None = None) -> str:
        """Return features_dir, raising if it was never configured.

        Raises:
            MissingConfigurationError: If features_dir is missing.
        """
        if self.features_dir is None:
            raise MissingConfigurationError("featuresDir", scope=scope, file_path=file_path)
        return self.features_dir


class PickleConfig(BaseModel):
    """Root configuration model (pickle block / pickle.yaml).

    Attributes:
        package_name: Java package of the generated PickleHash class.
        strict_mode: Strict mode flag forwarded to the runtime annotation.
        android_test: Instrumentation test configuration (enabled by default).
        unit_test: Local unit test configuration (disabled by default).

    Example:
        >>> config = PickleConfig(
        ...     packageName="com.example.test",
        ...     androidTest={"enabled": True, "featuresDir": "features"},
        ... )
        >>> config.android_test.features_dir
        'features'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    package_name: str | None = Field(
        default=None,
        min_length=1,
        description="Java package of the generated class",
    )
    strict_mode: bool = Field(
        default=True,
        description="Strict mode flag embedded in the generated annotation",
    )
    android_test: TestTarget = Field(
        default_factory=lambda: TestTarget(enabled=True),
        description="Instrumentation test configuration",
    )
    unit_test: TestTarget = Field(
        default_factory=lambda: TestTarget(enabled=False),
        description="Local unit test configuration",
    )

    def enabled_targets(self) -> list[tuple[str, TestTarget]]:
        """Return (scope, target) pairs for enabled test types, in binding order."""
        targets = [
            (ANDROID_TEST_SCOPE, self.android_test),
            (UNIT_TEST_SCOPE, self.unit_test),
        ]
        return [(scope, target) for scope, target in targets if target.enabled]

    def require_resolved(self, file_path: str | None = None) -> None:
        """Check keys that must be present once the configuration is resolved.

        Args:
            file_path: Source file, used only to enrich error messages.

        Raises:
            MissingConfigurationError: If featuresDir is missing for an
                enabled test type, or packageName is missing while any
                test type is enabled.
        """
        targets = self.enabled_targets()
        for scope, target in targets:
            target.require_features_dir(scope, file_path=file_path)

        if targets:
            self.require_package_name(file_path=file_path)

    def require_package_name(self, file_path: str | None = None) -> str:
        """Return package_name, raising if it was never configured.

        Raises:
            MissingConfigurationError: If package_name is missing.
        """
        if self.package_name is None:
            raise MissingConfigurationError("packageName", file_path=file_path)
        return self.package_name

    @classmethod
    def from_yaml(cls, path: str | Path) -> PickleConfig:
        """Load and validate PickleConfig from a YAML file.

        The file may either hold the configuration at its root or nest it
        under a top-level ``pickle`` key.

        Args:
            path: Path to pickle.yaml.

        Returns:
            Validated PickleConfig instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r") as f:
            data: Any = yaml.safe_load(f)

        # Non-mapping documents fall through to model_validate and fail there
        if data is None:
            data = {}
        elif isinstance(data, dict) and set(data) == {"pickle"}:
            data = data["pickle"] or {}

        return cls.model_validate(data)

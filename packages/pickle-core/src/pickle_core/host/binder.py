"""Variant binding for pickle-runtime.

VariantBinder turns the pickle configuration and the host's test variants
into one GraphNode per variant:

- instrumentation test variants read features from the merged assets
  directory (resolved by CapabilityResolver) and depend on the asset merge;
  an absolute featuresDir is still taken relative to that directory
- unit test variants read features from the configured path as given, with
  no extra dependency

Binding runs once per configuration phase. Asset directories are resolved
during that pass and never cached across passes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from pickle_core.errors import GraphConfigurationError, IncompatibleHostError
from pickle_core.generator.emitter import HASH_CLASS_FILE_NAME
from pickle_core.generator.models import GenerationUnit
from pickle_core.host.capabilities import CapabilityResolver
from pickle_core.host.graph import GraphNode
from pickle_core.schemas.config import ANDROID_TEST_SCOPE, UNIT_TEST_SCOPE, PickleConfig

logger = structlog.get_logger(__name__)

TASK_NAME_PREFIX = "generatePickleHashClass"

# Relative to the host build directory
GENERATED_SOURCE_ROOT = Path("generated", "source", "pickle")


def _strip_anchor(path: str) -> Path:
    """Return path without its root, so it always nests below another directory."""
    relative = Path(path)
    if relative.anchor:
        relative = relative.relative_to(relative.anchor)
    return relative


def task_name_for(variant_name: str) -> str:
    """Derive the node name for a variant, e.g. generatePickleHashClassDebugAndroidTest."""
    return TASK_NAME_PREFIX + variant_name[:1].upper() + variant_name[1:]


@dataclass(frozen=True)
class BindingFailure:
    """Variant that could not be bound.

    Attributes:
        scope: Test type the variant belongs to.
        variant_name: Name of the variant.
        error: Why binding failed.
    """

    scope: str
    variant_name: str
    error: IncompatibleHostError


@dataclass
class BindingResult:
    """Nodes created by one binding pass, plus per-variant failures."""

    nodes: list[GraphNode] = field(default_factory=list)
    failures: list[BindingFailure] = field(default_factory=list)

    def node(self, name: str) -> GraphNode:
        """Return the node with the given name.

        Raises:
            KeyError: If no such node was bound.
        """
        for node in self.nodes:
            if node.name == name:
                return node
        raise KeyError(name)


class VariantBinder:
    """Bind pickle generation nodes to host test variants.

    Attributes:
        config: Pickle configuration.
        build_dir: Host build directory; generated sources go below it.
        resolver: Capability resolver for merged assets.

    Example:
        >>> binder = VariantBinder(config, build_dir=Path("app/build"))
        >>> result = binder.bind(
        ...     android_test_variants=host.test_variants,
        ...     unit_test_variants=host.unit_test_variants,
        ... )
        >>> [node.name for node in result.nodes]
        ['generatePickleHashClassDebugAndroidTest']
    """

    def __init__(
        self,
        config: PickleConfig,
        build_dir: Path | str,
        resolver: CapabilityResolver | None = None,
    ) -> None:
        """Initialize the binder.

        Args:
            config: Pickle configuration from the host.
            build_dir: Host build directory.
            resolver: Resolver for merged assets. Defaults to the standard
                strategy list.
        """
        self.config = config
        self.build_dir = Path(build_dir)
        self.resolver = resolver or CapabilityResolver()
        self._log = logger.bind(component="variant_binder")

    def bind(
        self,
        android_test_variants: Iterable[Any] = (),
        unit_test_variants: Iterable[Any] = (),
    ) -> BindingResult:
        """Create generation nodes for every variant of each enabled test type.

        Args:
            android_test_variants: Instrumentation test variants.
            unit_test_variants: Local unit test variants.

        Returns:
            BindingResult with nodes and per-variant failures.

        Raises:
            MissingConfigurationError: If a required key is missing. Raised
                before any node is created.
            GraphConfigurationError: If two variants map to the same node name.
        """
        self.config.require_resolved()

        result = BindingResult()
        seen: set[str] = set()

        if self.config.android_test.enabled:
            for variant in android_test_variants:
                self._bind_variant(result, seen, ANDROID_TEST_SCOPE, variant)

        if self.config.unit_test.enabled:
            for variant in unit_test_variants:
                self._bind_variant(result, seen, UNIT_TEST_SCOPE, variant)

        self._log.info(
            "binding_completed",
            nodes=len(result.nodes),
            failures=len(result.failures),
        )
        return result

    def _bind_variant(
        self,
        result: BindingResult,
        seen: set[str],
        scope: str,
        variant: Any,
    ) -> None:
        name = task_name_for(variant.name)
        if name in seen:
            raise GraphConfigurationError(
                f"Variants produce duplicate task name '{name}'",
                field_path=scope,
            )
        seen.add(name)

        log = self._log.bind(variant=variant.name, scope=scope)
        try:
            features_dir, depends_on = self._resolve_features(scope, variant)
        except IncompatibleHostError as e:
            log.warning("variant_binding_failed", error=e.user_message)
            result.failures.append(BindingFailure(scope, variant.name, e))
            return

        generated_source_dir = self.build_dir / GENERATED_SOURCE_ROOT / variant.dir_name
        unit = GenerationUnit(
            package_name=self.config.require_package_name(),
            features_dir=features_dir,
            strict_mode=self.config.strict_mode,
            output_file=generated_source_dir / HASH_CLASS_FILE_NAME,
        )
        result.nodes.append(
            GraphNode(
                name=name,
                unit=unit,
                variant=variant,
                generated_source_dir=generated_source_dir,
                depends_on=depends_on,
            )
        )
        log.debug("variant_bound", node=name, features_dir=str(features_dir))

    def _resolve_features(self, scope: str, variant: Any) -> tuple[Path, tuple[Any, ...]]:
        """Return the variant's features directory and its dependencies."""
        if scope == ANDROID_TEST_SCOPE:
            features = self.config.android_test.require_features_dir(scope)
            resolution = self.resolver.resolve(variant)
            return resolution.output_dir / _strip_anchor(features), (resolution.ready_task,)

        features = self.config.unit_test.require_features_dir(scope)
        return Path(features), ()

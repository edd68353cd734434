"""Merged-assets resolution across host build API versions.

The host changed how a variant exposes its asset merge step:

- newer hosts: ``variant.merge_assets_provider`` is a lazy provider of the
  merge task, whose ``output_dir`` is itself a provider of a directory
- older hosts: ``variant.merge_assets`` is the task, and its ``output_dir``
  is a plain path

There is no version flag worth trusting, so each shape is a named
ResolutionStrategy that either returns an AssetsResolution or raises. The
resolver tries them in order and the first success wins; supporting a new
host shape means adding a strategy to the list.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog

from pickle_core.errors import IncompatibleHostError

logger = structlog.get_logger(__name__)


class Provider(Protocol):
    """Lazily evaluated value, realized with get()."""

    def get(self) -> Any: ...


class Variant(Protocol):
    """Build variant as exposed by the host.

    Only name and dir_name are required by the protocol; the asset merge
    accessors differ between host versions and are probed at runtime.
    """

    name: str
    dir_name: str


@dataclass(frozen=True)
class AssetsResolution:
    """Where merged assets land for a variant, and what produces them.

    Attributes:
        output_dir: Directory receiving the merged runtime assets.
        ready_task: Host handle to depend on so assets are merged first.
        strategy: Name of the strategy that produced this resolution.
    """

    output_dir: Path
    ready_task: Any
    strategy: str


@dataclass(frozen=True)
class ResolutionStrategy:
    """Named way of reading merged-assets information from a variant."""

    name: str
    resolve: Callable[[Any], AssetsResolution]


def _as_path(value: Any, what: str) -> Path:
    """Convert a realized directory to a Path, rejecting other shapes."""
    if hasattr(value, "as_file"):
        value = value.as_file
    if isinstance(value, (str, os.PathLike)):
        return Path(value)
    raise TypeError(f"{what} resolved to {type(value).__name__}, expected a directory")


def resolve_lazy_provider(variant: Any) -> AssetsResolution:
    """Resolve through the provider-based API of newer hosts."""
    task_provider = variant.merge_assets_provider
    merge_task = task_provider.get()
    output_dir = merge_task.output_dir.get()
    return AssetsResolution(
        output_dir=_as_path(output_dir, "merge_assets_provider.get().output_dir.get()"),
        ready_task=task_provider,
        strategy="lazy_provider",
    )


def resolve_eager_task(variant: Any) -> AssetsResolution:
    """Resolve through the direct task reference of older hosts."""
    merge_task = variant.merge_assets
    return AssetsResolution(
        output_dir=_as_path(merge_task.output_dir, "merge_assets.output_dir"),
        ready_task=merge_task,
        strategy="eager_task",
    )


LAZY_PROVIDER_STRATEGY = ResolutionStrategy("lazy_provider", resolve_lazy_provider)
EAGER_TASK_STRATEGY = ResolutionStrategy("eager_task", resolve_eager_task)

# Newest first
DEFAULT_STRATEGIES: tuple[ResolutionStrategy, ...] = (
    LAZY_PROVIDER_STRATEGY,
    EAGER_TASK_STRATEGY,
)


class CapabilityResolver:
    """Resolve merged-assets directory and task for a variant.

    Attributes:
        strategies: Strategies tried in order.

    Example:
        >>> resolver = CapabilityResolver()
        >>> resolution = resolver.resolve(variant)
        >>> resolution.output_dir
        PosixPath('/project/app/build/intermediates/merged_assets/debugAndroidTest/out')
    """

    def __init__(self, strategies: Sequence[ResolutionStrategy] | None = None) -> None:
        """Initialize the resolver.

        Args:
            strategies: Ordered strategies. Defaults to DEFAULT_STRATEGIES.
        """
        self.strategies = tuple(strategies if strategies is not None else DEFAULT_STRATEGIES)

    def resolve(self, variant: Any) -> AssetsResolution:
        """Try each strategy in order and return the first success.

        Args:
            variant: Host variant handle.

        Returns:
            AssetsResolution from the first strategy that succeeded.

        Raises:
            IncompatibleHostError: If every strategy failed.
        """
        variant_name = getattr(variant, "name", repr(variant))
        log = logger.bind(variant=variant_name)
        attempts: dict[str, str] = {}

        for strategy in self.strategies:
            try:
                resolution = strategy.resolve(variant)
            except Exception as e:
                attempts[strategy.name] = f"{type(e).__name__}: {e}"
                log.debug("strategy_failed", strategy=strategy.name, error=attempts[strategy.name])
                continue

            log.debug(
                "assets_resolved",
                strategy=strategy.name,
                output_dir=str(resolution.output_dir),
            )
            return resolution

        log.warning("host_incompatible", attempts=attempts)
        raise IncompatibleHostError(variant_name, attempts)

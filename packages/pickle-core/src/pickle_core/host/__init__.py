"""Host build integration for pickle-runtime.

- CapabilityResolver: Locate merged assets across host API versions
- VariantBinder: Create one generation node per test variant
- GraphNode / LocalBuildGraph: Node descriptors and the in-process adapter
"""

from __future__ import annotations

from pickle_core.host.binder import (
    GENERATED_SOURCE_ROOT,
    TASK_NAME_PREFIX,
    BindingFailure,
    BindingResult,
    VariantBinder,
    task_name_for,
)
from pickle_core.host.capabilities import (
    DEFAULT_STRATEGIES,
    EAGER_TASK_STRATEGY,
    LAZY_PROVIDER_STRATEGY,
    AssetsResolution,
    CapabilityResolver,
    ResolutionStrategy,
)
from pickle_core.host.graph import (
    BuildGraph,
    GraphNode,
    GraphRunReport,
    LocalBuildGraph,
    NodeState,
)

__all__: list[str] = [
    # Capability resolution
    "CapabilityResolver",
    "ResolutionStrategy",
    "AssetsResolution",
    "DEFAULT_STRATEGIES",
    "LAZY_PROVIDER_STRATEGY",
    "EAGER_TASK_STRATEGY",
    # Binding
    "VariantBinder",
    "BindingResult",
    "BindingFailure",
    "task_name_for",
    "TASK_NAME_PREFIX",
    "GENERATED_SOURCE_ROOT",
    # Graph
    "GraphNode",
    "NodeState",
    "BuildGraph",
    "LocalBuildGraph",
    "GraphRunReport",
]

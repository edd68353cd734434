"""pickle-core: Feature fingerprinting and hash class generation.

This package provides:
- PickleConfig: Pydantic schema for the pickle configuration block
- compute_fingerprint: Deterministic hash over a directory of .feature files
- emit_artifact / parse_artifact: Generated PickleHash.java and its parser
- CapabilityResolver: Merged-assets lookup across host build API versions
- VariantBinder: Per-variant generation nodes for the host build graph
"""

from __future__ import annotations

__version__ = "0.1.0"

# Error types
from pickle_core.errors import (
    ConfigurationError,
    ErrorKind,
    GraphConfigurationError,
    GraphStateError,
    IncompatibleHostError,
    InputNotFoundError,
    InputReadError,
    InvalidIdentifierError,
    MissingConfigurationError,
    PickleError,
    WriteFailedError,
)

# Generation
from pickle_core.generator import (
    ArtifactMetadata,
    GenerationUnit,
    ParsedArtifact,
    compute_fingerprint,
    emit_artifact,
    parse_artifact,
    read_artifact,
    render_artifact,
)

# Host integration
from pickle_core.host import (
    AssetsResolution,
    BindingResult,
    CapabilityResolver,
    GraphNode,
    LocalBuildGraph,
    NodeState,
    ResolutionStrategy,
    VariantBinder,
)

# Schema models
from pickle_core.schemas import PickleConfig, TestTarget

__all__ = [
    "__version__",
    # Errors
    "PickleError",
    "ErrorKind",
    "ConfigurationError",
    "MissingConfigurationError",
    "GraphConfigurationError",
    "GraphStateError",
    "InputNotFoundError",
    "InputReadError",
    "IncompatibleHostError",
    "WriteFailedError",
    "InvalidIdentifierError",
    # Generation
    "compute_fingerprint",
    "emit_artifact",
    "render_artifact",
    "parse_artifact",
    "read_artifact",
    "ArtifactMetadata",
    "GenerationUnit",
    "ParsedArtifact",
    # Host integration
    "CapabilityResolver",
    "ResolutionStrategy",
    "AssetsResolution",
    "VariantBinder",
    "BindingResult",
    "GraphNode",
    "NodeState",
    "LocalBuildGraph",
    # Schema models
    "PickleConfig",
    "TestTarget",
]

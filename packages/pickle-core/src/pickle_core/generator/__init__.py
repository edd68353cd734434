"""Generator module for pickle-runtime.

This module exports the fingerprint engine, the artifact emitter and the
models flowing between them:
- compute_fingerprint: Fingerprint the .feature files under a directory
- emit_artifact / render_artifact: Write or render the PickleHash class
- parse_artifact / read_artifact: Recover embedded values from generated source
- GenerationUnit: Per-variant work item
"""

from __future__ import annotations

from pickle_core.generator.emitter import (
    ANNOTATION_CLASS,
    HASH_CLASS_FILE_NAME,
    HASH_CLASS_NAME,
    HASH_FIELD_NAME,
    emit_artifact,
    parse_artifact,
    read_artifact,
    render_artifact,
    validate_package_name,
)
from pickle_core.generator.fingerprint import (
    EMPTY_FINGERPRINT,
    FEATURE_FILE_SUFFIX,
    compute_fingerprint,
    fingerprint_files,
    iter_feature_files,
    java_string_hash,
)
from pickle_core.generator.models import ArtifactMetadata, GenerationUnit, ParsedArtifact

__all__: list[str] = [
    # Fingerprint engine
    "compute_fingerprint",
    "fingerprint_files",
    "iter_feature_files",
    "java_string_hash",
    "EMPTY_FINGERPRINT",
    "FEATURE_FILE_SUFFIX",
    # Artifact emitter
    "emit_artifact",
    "render_artifact",
    "parse_artifact",
    "read_artifact",
    "validate_package_name",
    "ANNOTATION_CLASS",
    "HASH_CLASS_NAME",
    "HASH_CLASS_FILE_NAME",
    "HASH_FIELD_NAME",
    # Models
    "ArtifactMetadata",
    "GenerationUnit",
    "ParsedArtifact",
]

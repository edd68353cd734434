"""Generator models for pickle-runtime.

This module defines the records that flow through generation:
- ArtifactMetadata: configuration triple embedded in the generated class
- GenerationUnit: per-variant work item created by the Variant Binder
- ParsedArtifact: values recovered from a generated source file
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Java int bounds; fingerprints are stored in an int constant
JAVA_INT_MIN = -(2**31)
JAVA_INT_MAX = 2**31 - 1


class ArtifactMetadata(BaseModel):
    """Configuration attached to the generated class as an annotation.

    Attributes:
        features_dir: Absolute path of the fingerprinted features directory.
        package_name: Java package of the generated class.
        strict_mode: Strict mode flag for the runtime.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    features_dir: str = Field(..., min_length=1, description="Absolute features directory")
    package_name: str = Field(..., min_length=1, description="Java package name")
    strict_mode: bool = Field(..., description="Strict mode flag")


class ParsedArtifact(BaseModel):
    """Values recovered by parsing a generated PickleHash source file.

    Attributes:
        package_name: Package declared by the file.
        type_name: Name of the declared class.
        fingerprint: Value of the HASH_CODE constant.
        metadata: Annotation members.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str
    type_name: str
    fingerprint: int = Field(..., ge=JAVA_INT_MIN, le=JAVA_INT_MAX)
    metadata: ArtifactMetadata


class GenerationUnit(BaseModel):
    """Work item for one variant: fingerprint a directory, emit one file.

    Created once per enabled variant while binding; immutable thereafter.

    Attributes:
        package_name: Java package of the generated class.
        features_dir: Directory whose .feature files are fingerprinted.
        strict_mode: Strict mode flag for the runtime annotation.
        output_file: Generated PickleHash.java location.

    Example:
        >>> unit = GenerationUnit(
        ...     package_name="com.example.test",
        ...     features_dir=Path("features"),
        ...     strict_mode=True,
        ...     output_file=Path("build/generated/source/pickle/debug/PickleHash.java"),
        ... )
        >>> unit.run()
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str
    features_dir: Path
    strict_mode: bool
    output_file: Path

    def metadata(self) -> ArtifactMetadata:
        """Build the annotation metadata, using the absolute features path."""
        return ArtifactMetadata(
            features_dir=str(self.features_dir.absolute()),
            package_name=self.package_name,
            strict_mode=self.strict_mode,
        )

    def run(self) -> Path:
        """Fingerprint the features directory and write the artifact.

        Returns:
            Path of the written artifact.

        Raises:
            InputNotFoundError: If the features directory is missing.
            InputReadError: If a feature file cannot be read.
            InvalidIdentifierError: If package_name is not a valid package.
            WriteFailedError: If the output file cannot be written.
        """
        # Imported here because the emitter imports this module
        from pickle_core.generator.emitter import emit_artifact, validate_package_name
        from pickle_core.generator.fingerprint import compute_fingerprint

        validate_package_name(self.package_name)
        fingerprint = compute_fingerprint(self.features_dir)
        logger.debug("Fingerprint for %s is %d", self.features_dir, fingerprint)

        return emit_artifact(
            self.package_name,
            fingerprint,
            self.metadata(),
            self.output_file,
        )

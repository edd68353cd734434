"""Feature directory fingerprinting.

The fingerprint is Java's String.hashCode() of the concatenated text of
every .feature file below a directory, so the constant in the generated
class matches what the JVM side computes over the same files.

Files are folded in sorted relative-path order, which makes the result
independent of filesystem enumeration order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pickle_core.errors import InputNotFoundError, InputReadError

logger = logging.getLogger(__name__)

FEATURE_FILE_SUFFIX = ".feature"

# Fingerprint of a directory without feature files
EMPTY_FINGERPRINT = 0


def is_feature_file(path: Path) -> bool:
    """Return True if the file name ends with .feature (any case)."""
    return path.name.lower().endswith(FEATURE_FILE_SUFFIX)


def iter_feature_files(directory: Path | str) -> Iterator[Path]:
    """Yield feature files under a directory in fingerprint order.

    Args:
        directory: Root directory to walk recursively.

    Yields:
        Paths of matching files, sorted by POSIX path relative to directory.

    Raises:
        InputNotFoundError: If directory does not exist or is not a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        raise InputNotFoundError(root)

    matches = [p for p in root.rglob("*") if p.is_file() and is_feature_file(p)]
    yield from sorted(matches, key=lambda p: p.relative_to(root).as_posix())


def java_string_hash(text: str, seed: int = 0) -> int:
    """Compute Java's String.hashCode() for text.

    Iterates UTF-16 code units, so characters outside the BMP contribute
    their surrogate pair as in the JVM.

    Args:
        text: Text to hash.
        seed: Running hash to continue from (used to fold several chunks).

    Returns:
        Signed 32-bit hash.
    """
    h = seed & 0xFFFFFFFF
    data = text.encode("utf-16-be", errors="surrogatepass")
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def fold_contents(chunks: Iterable[str]) -> int:
    """Fold text chunks as if hashing their concatenation."""
    h = EMPTY_FINGERPRINT
    for chunk in chunks:
        h = java_string_hash(chunk, seed=h)
    return h


def read_feature_text(path: Path) -> str:
    """Read one feature file as text.

    Undecodable bytes become U+FFFD, as with the JVM's default reader.

    Raises:
        InputReadError: If the file cannot be read.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InputReadError(path, internal_details=repr(e)) from e
    return data.decode("utf-8", errors="replace")


def fingerprint_files(files: Iterable[Path]) -> int:
    """Fold already listed feature files, in the given order.

    Raises:
        InputReadError: If any file cannot be read.
    """
    return fold_contents(read_feature_text(p) for p in files)


def compute_fingerprint(directory: Path | str) -> int:
    """Compute the fingerprint of the feature files under directory.

    Args:
        directory: Features directory.

    Returns:
        Signed 32-bit fingerprint; EMPTY_FINGERPRINT when no file matches.

    Raises:
        InputNotFoundError: If directory does not exist.
        InputReadError: If a feature file cannot be read.

    Example:
        >>> compute_fingerprint(empty_dir)
        0
        >>> compute_fingerprint(features_dir) == java_string_hash("Scenario: AScenario: B")
        True
    """
    files = list(iter_feature_files(directory))
    logger.debug("Fingerprinting %d feature files under %s", len(files), directory)
    return fingerprint_files(files)

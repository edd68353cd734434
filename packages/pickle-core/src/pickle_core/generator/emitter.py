"""PickleHash.java emitter for pickle-runtime.

This module renders the generated hash class and writes it for the host
compiler. The class carries the features fingerprint as a constant and the
originating configuration as a @Pickle annotation, which the annotation
processor reads when generating test classes:

    package com.example.test;

    import com.fourlastor.pickle.Pickle;

    @Pickle(
        featuresDir = "/project/app/build/intermediates/assets/features",
        packageName = "com.example.test",
        strictMode = true
    )
    public class PickleHash {
      private static final int HASH_CODE = 1234;
    }

Key Features:
    - Deterministic output, so re-running on unchanged input is byte-identical
    - Atomic write: a partially written file is never visible to the compiler
    - parse_artifact() recovers every embedded value from the source text
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from pickle_core.errors import InvalidIdentifierError, WriteFailedError
from pickle_core.generator.models import (
    JAVA_INT_MAX,
    JAVA_INT_MIN,
    ArtifactMetadata,
    ParsedArtifact,
)

logger = logging.getLogger(__name__)

HASH_CLASS_NAME = "PickleHash"
HASH_FIELD_NAME = "HASH_CODE"
ANNOTATION_CLASS = "com.fourlastor.pickle.Pickle"
HASH_CLASS_FILE_NAME = f"{HASH_CLASS_NAME}.java"

# JavaPoet's default indent
INDENT = "  "

JAVA_RESERVED_WORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
        "class", "const", "continue", "default", "do", "double", "else", "enum",
        "extends", "final", "finally", "float", "for", "goto", "if", "implements",
        "import", "instanceof", "int", "interface", "long", "native", "new",
        "package", "private", "protected", "public", "return", "short", "static",
        "strictfp", "super", "switch", "synchronized", "this", "throw", "throws",
        "transient", "try", "void", "volatile", "while", "true", "false", "null",
        "_",
    }
)  # fmt: skip

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_JAVA_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}
_JAVA_UNESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    "s": " ",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

_STRING_LITERAL = r'"(?:[^"\\]|\\.)*"'
_PACKAGE_RE = re.compile(r"^\s*package\s+([\w$.]+)\s*;", re.MULTILINE)
_ANNOTATION_RE = re.compile(
    r"@(?:[\w$]+\.)*Pickle\s*\(((?:\s*[\w$]+\s*=\s*(?:" + _STRING_LITERAL + r"|true|false)\s*,?)*)\s*\)",
    re.DOTALL,
)
_MEMBER_RE = re.compile(r"([\w$]+)\s*=\s*(" + _STRING_LITERAL + r"|true|false)", re.DOTALL)
_CLASS_RE = re.compile(r"\bclass\s+([\w$]+)")
_FIELD_RE = re.compile(r"\bstatic\s+final\s+int\s+" + HASH_FIELD_NAME + r"\s*=\s*(-?\d+)\s*;")
_ESCAPE_RE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-7]{1,3}|.)", re.DOTALL)


def validate_package_name(package_name: str) -> str:
    """Check that package_name is a valid Java qualified name.

    Args:
        package_name: Dot-separated package name.

    Returns:
        The package name, unchanged.

    Raises:
        InvalidIdentifierError: If any segment is empty, not an identifier,
            or a reserved word.
    """
    if not package_name:
        raise InvalidIdentifierError(package_name, reason="empty")

    for segment in package_name.split("."):
        if not _IDENTIFIER_RE.fullmatch(segment):
            raise InvalidIdentifierError(package_name, reason=f"'{segment}' is not an identifier")
        if segment in JAVA_RESERVED_WORDS:
            raise InvalidIdentifierError(package_name, reason=f"'{segment}' is a reserved word")

    return package_name


def java_string_literal(value: str) -> str:
    """Quote value as a Java string literal, escaping like JavaPoet's $S."""
    out = []
    for ch in value:
        if ch in _JAVA_ESCAPES:
            out.append(_JAVA_ESCAPES[ch])
        elif ord(ch) < 0x20 or 0x7F <= ord(ch) < 0xA0 or 0xD800 <= ord(ch) <= 0xDFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def parse_java_string_literal(literal: str) -> str:
    """Inverse of java_string_literal(); accepts any valid Java escape."""
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise ValueError(f"Not a Java string literal: {literal!r}")

    def _replace(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape[0] == "u":
            return chr(int(escape.lstrip("u"), 16))
        if escape[0] in "01234567":
            return chr(int(escape, 8))
        if escape in _JAVA_UNESCAPES:
            return _JAVA_UNESCAPES[escape]
        raise ValueError(f"Invalid escape sequence: \\{escape}")

    return _ESCAPE_RE.sub(_replace, literal[1:-1])


def render_artifact(package_name: str, fingerprint: int, metadata: ArtifactMetadata) -> str:
    """Render the PickleHash class source.

    Args:
        package_name: Package of the generated class.
        fingerprint: Features fingerprint, stored as HASH_CODE.
        metadata: Values for the @Pickle annotation.

    Returns:
        Java source text ending with a newline.

    Raises:
        InvalidIdentifierError: If package_name is not a valid package.
        ValueError: If fingerprint does not fit in a Java int.
    """
    validate_package_name(package_name)
    if not JAVA_INT_MIN <= fingerprint <= JAVA_INT_MAX:
        raise ValueError(f"Fingerprint {fingerprint} does not fit in a Java int")

    annotation_package, _, annotation_name = ANNOTATION_CLASS.rpartition(".")
    members = [
        f"featuresDir = {java_string_literal(metadata.features_dir)}",
        f"packageName = {java_string_literal(metadata.package_name)}",
        f"strictMode = {'true' if metadata.strict_mode else 'false'}",
    ]

    lines = [f"package {package_name};", ""]
    # Same-package annotations need no import
    if annotation_package != package_name:
        lines += [f"import {ANNOTATION_CLASS};", ""]
    lines.append(f"@{annotation_name}(")
    lines.append(",\n".join(f"{INDENT * 2}{member}" for member in members))
    lines.append(")")
    lines.append(f"public class {HASH_CLASS_NAME} {{")
    lines.append(f"{INDENT}private static final int {HASH_FIELD_NAME} = {fingerprint};")
    lines.append("}")

    return "\n".join(lines) + "\n"


def emit_artifact(
    package_name: str,
    fingerprint: int,
    metadata: ArtifactMetadata,
    output_file: Path | str,
) -> Path:
    """Render and write the PickleHash class, replacing any previous file.

    Missing parent directories are created. The source is written to a
    temporary file next to output_file and moved into place, so readers
    only ever see a complete file.

    Args:
        package_name: Package of the generated class.
        fingerprint: Features fingerprint.
        metadata: Values for the @Pickle annotation.
        output_file: Destination file.

    Returns:
        Path of the written file.

    Raises:
        InvalidIdentifierError: If package_name is not a valid package.
        WriteFailedError: If the file or its directories cannot be written.
    """
    output_file = Path(output_file)
    source = render_artifact(package_name, fingerprint, metadata)

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_file.name}.",
            suffix=".tmp",
            dir=output_file.parent,
        )
    except OSError as e:
        raise WriteFailedError(output_file, internal_details=repr(e)) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(source)
        tmp_path.chmod(0o644)
        os.replace(tmp_path, output_file)
    except OSError as e:
        raise WriteFailedError(output_file, internal_details=repr(e)) from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    logger.info("Generated %s at %s", HASH_CLASS_NAME, output_file)
    return output_file


def parse_artifact(source: str) -> ParsedArtifact:
    """Recover package, fingerprint and metadata from generated source.

    Args:
        source: Text of a generated PickleHash class.

    Returns:
        ParsedArtifact with the embedded values.

    Raises:
        ValueError: If the source lacks the package, annotation, class or
            HASH_CODE constant, or an annotation member is missing.
    """
    package = _PACKAGE_RE.search(source)
    annotation = _ANNOTATION_RE.search(source)
    declared = _CLASS_RE.search(source, annotation.end() if annotation else 0)
    field = _FIELD_RE.search(source)

    if package is None or annotation is None or declared is None or field is None:
        missing = [
            name
            for name, match in (
                ("package declaration", package),
                ("@Pickle annotation", annotation),
                ("class declaration", declared),
                (f"{HASH_FIELD_NAME} constant", field),
            )
            if match is None
        ]
        raise ValueError(f"Not a generated {HASH_CLASS_NAME} source: missing {', '.join(missing)}")

    members: dict[str, str | bool] = {}
    for name, raw in _MEMBER_RE.findall(annotation.group(1)):
        members[name] = raw == "true" if raw in ("true", "false") else parse_java_string_literal(raw)

    try:
        metadata = ArtifactMetadata(
            features_dir=members["featuresDir"],
            package_name=members["packageName"],
            strict_mode=members["strictMode"],
        )
    except KeyError as e:
        raise ValueError(f"@Pickle annotation is missing member {e}") from e

    return ParsedArtifact(
        package_name=package.group(1),
        type_name=declared.group(1),
        fingerprint=int(field.group(1)),
        metadata=metadata,
    )


def read_artifact(path: Path | str) -> ParsedArtifact:
    """Read and parse a generated PickleHash file."""
    return parse_artifact(Path(path).read_text(encoding="utf-8"))

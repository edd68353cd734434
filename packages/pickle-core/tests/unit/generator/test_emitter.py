"""Unit tests for the PickleHash emitter and parser."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pickle_core.errors import InvalidIdentifierError, WriteFailedError
from pickle_core.generator.emitter import (
    emit_artifact,
    java_string_literal,
    parse_artifact,
    parse_java_string_literal,
    read_artifact,
    render_artifact,
    validate_package_name,
)
from pickle_core.generator.models import ArtifactMetadata


@pytest.fixture
def metadata() -> ArtifactMetadata:
    """Metadata for the canonical package."""
    return ArtifactMetadata(
        features_dir="/project/features",
        package_name="com.example.test",
        strict_mode=True,
    )


EXPECTED_SOURCE = """\
package com.example.test;

import com.fourlastor.pickle.Pickle;

@Pickle(
    featuresDir = "/project/features",
    packageName = "com.example.test",
    strictMode = true
)
public class PickleHash {
  private static final int HASH_CODE = -42;
}
"""


class TestRenderArtifact:
    """Tests for render_artifact()."""

    def test_renders_expected_source(self, metadata: ArtifactMetadata) -> None:
        """Output matches the JavaPoet layout."""
        assert render_artifact("com.example.test", -42, metadata) == EXPECTED_SOURCE

    def test_strict_mode_false(self, metadata: ArtifactMetadata) -> None:
        """strictMode is rendered as a boolean literal."""
        relaxed = metadata.model_copy(update={"strict_mode": False})
        assert "strictMode = false" in render_artifact("com.example.test", 0, relaxed)

    def test_same_package_annotation_not_imported(self, metadata: ArtifactMetadata) -> None:
        """No import when the class lives in the annotation's package."""
        source = render_artifact("com.fourlastor.pickle", 0, metadata)
        assert "import " not in source
        assert "@Pickle(" in source

    def test_deterministic(self, metadata: ArtifactMetadata) -> None:
        """Same input renders the same text."""
        assert render_artifact("com.example.test", 7, metadata) == render_artifact(
            "com.example.test", 7, metadata
        )

    @pytest.mark.parametrize("fingerprint", [2**31, -(2**31) - 1])
    def test_fingerprint_out_of_int_range(self, metadata: ArtifactMetadata, fingerprint: int) -> None:
        """Fingerprints must fit in a Java int."""
        with pytest.raises(ValueError, match="Java int"):
            render_artifact("com.example.test", fingerprint, metadata)

    def test_int_bounds_accepted(self, metadata: ArtifactMetadata) -> None:
        """Both ends of the int range render."""
        assert "= -2147483648;" in render_artifact("a.b", -(2**31), metadata)
        assert "= 2147483647;" in render_artifact("a.b", 2**31 - 1, metadata)


class TestValidatePackageName:
    """Tests for Java package name validation."""

    @pytest.mark.parametrize(
        "name",
        ["com.example.test", "a", "_internal.pkg", "com.$gen", "com.example2.v1"],
    )
    def test_valid(self, name: str) -> None:
        """Valid qualified names pass unchanged."""
        assert validate_package_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", "com..test", ".com", "com.", "1com", "com.exa-mple", "com.class", "com.example.int", "com. x"],
    )
    def test_invalid(self, name: str) -> None:
        """Invalid names raise InvalidIdentifierError."""
        with pytest.raises(InvalidIdentifierError):
            validate_package_name(name)

    def test_render_rejects_invalid_package(self, metadata: ArtifactMetadata) -> None:
        """render_artifact validates the package first."""
        with pytest.raises(InvalidIdentifierError):
            render_artifact("com.package", 0, metadata)


class TestJavaStringLiteral:
    """Tests for string literal escaping."""

    def test_plain(self) -> None:
        """Plain text is only quoted."""
        assert java_string_literal("/project/features") == '"/project/features"'

    def test_escapes(self) -> None:
        """Quotes, backslashes and control characters are escaped."""
        assert java_string_literal('C:\\a "b"\n\t') == '"C:\\\\a \\"b\\"\\n\\t"'
        assert java_string_literal("\x01") == '"\\u0001"'

    @pytest.mark.parametrize(
        "value",
        ["", "plain", 'quote " inside', "back\\slash", "tab\tnew\nline\r", "\x00\x7f\x85", "ünï 日本 \U0001f600"],
    )
    def test_parse_inverts_escaping(self, value: str) -> None:
        """parse_java_string_literal undoes java_string_literal."""
        assert parse_java_string_literal(java_string_literal(value)) == value

    def test_parse_octal_and_unicode(self) -> None:
        """Octal and \\uXXXX escapes written by hand are understood."""
        assert parse_java_string_literal('"\\101\\u0042\\uu0043"') == "ABC"

    def test_parse_rejects_unquoted(self) -> None:
        """Input must be a quoted literal."""
        with pytest.raises(ValueError):
            parse_java_string_literal("abc")


class TestParseArtifact:
    """Tests for parse_artifact()."""

    def test_round_trip(self, metadata: ArtifactMetadata) -> None:
        """Parsing rendered output recovers every value."""
        parsed = parse_artifact(render_artifact("com.example.test", -42, metadata))

        assert parsed.package_name == "com.example.test"
        assert parsed.type_name == "PickleHash"
        assert parsed.fingerprint == -42
        assert parsed.metadata == metadata

    def test_round_trip_awkward_path(self) -> None:
        """Paths with quotes, parentheses and backslashes survive."""
        metadata = ArtifactMetadata(
            features_dir='C:\\Users\\dev\\my "features" (copy)',
            package_name="com.example.test",
            strict_mode=False,
        )
        parsed = parse_artifact(render_artifact("com.example.test", 1, metadata))
        assert parsed.metadata == metadata

    def test_fully_qualified_annotation(self) -> None:
        """Hand-written sources may use the qualified annotation name."""
        source = (
            "package a.b;\n"
            '@com.fourlastor.pickle.Pickle(featuresDir = "/f", packageName = "a.b", strictMode = false)\n'
            "public final class PickleHash { private static final int HASH_CODE = 5; }\n"
        )
        parsed = parse_artifact(source)
        assert parsed.fingerprint == 5
        assert parsed.metadata.strict_mode is False

    def test_missing_parts(self) -> None:
        """Arbitrary Java is rejected with the missing parts named."""
        with pytest.raises(ValueError, match="@Pickle annotation"):
            parse_artifact("package a.b;\npublic class Foo { static final int HASH_CODE = 1; }\n")

    def test_missing_member(self) -> None:
        """All three annotation members are required."""
        source = (
            "package a.b;\n"
            '@Pickle(featuresDir = "/f", strictMode = true)\n'
            "public class PickleHash { private static final int HASH_CODE = 1; }\n"
        )
        with pytest.raises(ValueError, match="packageName"):
            parse_artifact(source)


class TestEmitArtifact:
    """Tests for emit_artifact()."""

    def test_writes_file(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """The rendered source is written as UTF-8."""
        output = tmp_path / "PickleHash.java"
        written = emit_artifact("com.example.test", -42, metadata, output)

        assert written == output
        assert output.read_text(encoding="utf-8") == EXPECTED_SOURCE

    def test_creates_parent_directories(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Missing parents are created."""
        output = tmp_path / "build" / "generated" / "source" / "pickle" / "debug" / "PickleHash.java"
        emit_artifact("com.example.test", 1, metadata, output)
        assert output.is_file()

    def test_overwrites(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Existing output is replaced unconditionally."""
        output = tmp_path / "PickleHash.java"
        output.write_text("stale")
        emit_artifact("com.example.test", 2, metadata, output)
        assert read_artifact(output).fingerprint == 2

    def test_idempotent_bytes(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Two runs produce byte-identical files."""
        output = tmp_path / "PickleHash.java"
        emit_artifact("com.example.test", 3, metadata, output)
        first = output.read_bytes()
        emit_artifact("com.example.test", 3, metadata, output)
        assert output.read_bytes() == first
        assert b"\r\n" not in first

    def test_no_temporary_files_left(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Only the artifact remains in the output directory."""
        emit_artifact("com.example.test", 4, metadata, tmp_path / "PickleHash.java")
        assert os.listdir(tmp_path) == ["PickleHash.java"]

    def test_parent_is_a_file(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """An unusable parent directory raises WriteFailedError."""
        blocker = tmp_path / "build"
        blocker.write_text("not a directory")
        with pytest.raises(WriteFailedError) as exc_info:
            emit_artifact("com.example.test", 0, metadata, blocker / "PickleHash.java")
        assert exc_info.value.path == blocker / "PickleHash.java"

    def test_output_is_a_directory(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Replacing a directory fails cleanly and leaves no temp file."""
        output = tmp_path / "PickleHash.java"
        output.mkdir()
        with pytest.raises(WriteFailedError):
            emit_artifact("com.example.test", 0, metadata, output)
        assert sorted(os.listdir(tmp_path)) == ["PickleHash.java"]
        assert output.is_dir()

    def test_invalid_package_writes_nothing(self, tmp_path: Path, metadata: ArtifactMetadata) -> None:
        """Validation happens before touching the filesystem."""
        output = tmp_path / "out" / "PickleHash.java"
        with pytest.raises(InvalidIdentifierError):
            emit_artifact("com.1bad", 0, metadata, output)
        assert not (tmp_path / "out").exists()

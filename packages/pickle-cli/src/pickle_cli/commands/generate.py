"""pickle generate command - Write PickleHash.java for a features directory."""

from __future__ import annotations

from pathlib import Path

import click

from pickle_cli.output import success


@click.command()
@click.option(
    "-d",
    "--features-dir",
    "features_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    help="Directory containing .feature files",
)
@click.option(
    "-p",
    "--package",
    "package_name",
    type=str,
    required=True,
    help="Java package of the generated class",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=Path("build/generated/source/pickle"),
    show_default=True,
    help="Output directory (PickleHash.java is written inside)",
)
@click.option(
    "--strict/--no-strict",
    "strict_mode",
    default=True,
    show_default=True,
    help="Strict mode flag embedded in the @Pickle annotation",
)
def generate(features_dir: Path, package_name: str, output_path: Path, strict_mode: bool) -> None:
    """Generate PickleHash.java for a features directory.

    Runs the same generation step the build performs for a variant.
    The file is rewritten on every run; unchanged inputs produce an
    identical file.

    Examples:

        pickle generate -d features -p com.example.test

        pickle generate -d features -p com.example.test -o build/gen --no-strict
    """
    from pickle_core.errors import PickleError
    from pickle_core.generator import HASH_CLASS_FILE_NAME, GenerationUnit

    from pickle_cli.errors import handle_pickle_error

    unit = GenerationUnit(
        package_name=package_name,
        features_dir=features_dir,
        strict_mode=strict_mode,
        output_file=output_path / HASH_CLASS_FILE_NAME,
    )

    try:
        written = unit.run()
    except PickleError as e:
        handle_pickle_error(e)

    success(f"Generated {written}")

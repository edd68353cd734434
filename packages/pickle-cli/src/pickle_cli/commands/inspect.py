"""pickle inspect command - Show values embedded in a generated PickleHash.java."""

from __future__ import annotations

from pathlib import Path

import click

from pickle_cli.output import info, print_json


@click.command("inspect")
@click.argument("artifact", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the parsed values as JSON.",
)
def inspect_cmd(artifact: Path, as_json: bool) -> None:
    """Show the fingerprint and @Pickle metadata of ARTIFACT.

    Examples:

        pickle inspect build/generated/source/pickle/debugAndroidTest/PickleHash.java
    """
    from pickle_core.generator import read_artifact

    from pickle_cli.errors import CLIError

    try:
        parsed = read_artifact(artifact)
    except ValueError as e:
        raise CLIError(f"Cannot parse {artifact}: {e}") from None

    if as_json:
        print_json(parsed.model_dump(mode="json"))
        return

    info(f"class:        {parsed.package_name}.{parsed.type_name}")
    info(f"fingerprint:  {parsed.fingerprint}")
    info(f"featuresDir:  {parsed.metadata.features_dir}")
    info(f"packageName:  {parsed.metadata.package_name}")
    info(f"strictMode:   {str(parsed.metadata.strict_mode).lower()}")

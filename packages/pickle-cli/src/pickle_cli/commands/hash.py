"""pickle hash command - Fingerprint a features directory."""

from __future__ import annotations

from pathlib import Path

import click

from pickle_cli.output import info, print_json


@click.command("hash")
@click.argument("features_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the fingerprint and matched files as JSON.",
)
def hash_cmd(features_dir: Path, as_json: bool) -> None:
    """Compute the fingerprint of the .feature files in FEATURES_DIR.

    Files are matched recursively by their .feature extension (any case)
    and hashed in sorted path order.

    Examples:

        pickle hash src/androidTest/assets/features

        pickle hash features --json
    """
    from pickle_core.errors import PickleError
    from pickle_core.generator.fingerprint import fingerprint_files, iter_feature_files

    from pickle_cli.errors import handle_pickle_error

    try:
        files = list(iter_feature_files(features_dir))
        fingerprint = fingerprint_files(files)
    except PickleError as e:
        handle_pickle_error(e)

    if as_json:
        print_json(
            {
                "features_dir": str(features_dir.absolute()),
                "fingerprint": fingerprint,
                "files": [p.relative_to(features_dir).as_posix() for p in files],
            }
        )
    else:
        info(str(fingerprint))

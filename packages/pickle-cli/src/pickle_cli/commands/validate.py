"""pickle validate command - Validate pickle.yaml configuration."""

from __future__ import annotations

from pathlib import Path

import click

from pickle_cli.output import info, success


@click.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default="./pickle.yaml",
    envvar="PICKLE_CONFIG",
    help="Path to pickle.yaml [default: ./pickle.yaml, env: PICKLE_CONFIG]",
)
def validate(config_path: str) -> None:
    """Validate pickle.yaml configuration.

    Checks the schema and the keys required by enabled test types
    (featuresDir for each enabled block, packageName).

    Examples:

        pickle validate

        pickle validate --config app/pickle.yaml
    """
    from pickle_cli.errors import handle_file_not_found

    path = Path(config_path)
    if not path.exists():
        handle_file_not_found(config_path)

    # Import here to avoid heavy imports at CLI startup
    import yaml
    from pydantic import ValidationError as PydanticValidationError

    from pickle_core.errors import PickleError
    from pickle_core.schemas import PickleConfig

    from pickle_cli.errors import (
        CLIError,
        format_pydantic_error,
        handle_pickle_error,
        handle_yaml_error,
    )

    try:
        config = PickleConfig.from_yaml(path)
        config.require_resolved(file_path=config_path)
    except yaml.YAMLError as e:
        handle_yaml_error(e, config_path)
    except PydanticValidationError as e:
        raise CLIError(f"Invalid configuration in {config_path}:\n{format_pydantic_error(e)}") from None
    except PickleError as e:
        handle_pickle_error(e)

    success("Configuration valid")
    for scope, target in config.enabled_targets():
        info(f"  {scope}: {target.features_dir}")

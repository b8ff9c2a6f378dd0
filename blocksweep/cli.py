"""
Click CLI interface for blocksweep.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from click.core import ParameterSource

from .config import PROVIDERS, build_config
from .errors import ConfigError
from .orchestrator import Sweeper
from .providers import build_provider

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    # botocore and urllib3 are very chatty at DEBUG
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="blocksweep")
@click.option("--debug/--no-debug", default=True, help="Turn on debug output")
@click.option("--volumes-age", "volumes_age_days", type=int, default=7, help="Delete volumes older than X days")
@click.option("--snapshots-age", "snapshots_age_days", type=int, default=30, help="Delete snapshots older than X days")
@click.option("--dry-run/--no-dry-run", default=True, help="Don't execute final calls, just print what you would do")
@click.option("--check-tags", is_flag=True, help="Also protect resources whose tags contain a safe word (slow)")
@click.option("--provider", type=click.Choice(PROVIDERS), default="ec2", help="Where to list resources from")
@click.option("--region", "regions", multiple=True, help="EC2 region to sweep (repeatable)")
@click.option("--api-url", help="Management API base URL (cloud-api provider)")
@click.option("--legacy-ec2", is_flag=True, help="Also sweep EC2 regions through the legacy 1.0 API")
@click.option("--timeout", type=float, default=30.0, help="Per-request timeout in seconds")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML file with default settings")
@click.pass_context
def main(ctx, config_file: Optional[Path], **options):
    """
    Delete old volumes and snapshots across all clouds.

    Deletes any volumes not in use and any old snapshots other than base
    image snapshots. Put "save" in the description or nickname to prevent
    deletion.
    """
    # Flags left at their defaults must not mask config file values
    cli_values = {
        name: value for name, value in options.items()
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT
    }
    if not cli_values.get("regions"):
        cli_values.pop("regions", None)

    try:
        config = build_config(cli_values, config_file=config_file)
    except ConfigError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(2)

    configure_logging(config.debug)
    provider = build_provider(config)
    summary = Sweeper(provider, config).run()
    sys.exit(summary.exit_code)


if __name__ == "__main__":
    main()

"""Entry point for the ``daktela`` command."""

from typing import Optional

import click

from daktela_v6 import __version__
from daktela_v6.cli.commands import (
    create_cmd,
    delete_cmd,
    health_cmd,
    ping_cmd,
    read_cmd,
    update_cmd,
)
from daktela_v6.cli.context import CliContext


@click.group()
@click.version_option(__version__, prog_name="daktela")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="TOML config file (overrides DAKTELA_CONFIG_FILE).",
)
@click.option("--instance", help="Instance URL (overrides DAKTELA_INSTANCE).")
@click.option("--token", "access_token", help="Access token (overrides DAKTELA_ACCESSTOKEN).")
@click.option("-v", "--verbose", is_flag=True, help="Log every request at DEBUG level.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[str],
    instance: Optional[str],
    access_token: Optional[str],
    verbose: bool,
) -> None:
    """Daktela V6 command line client."""
    if isinstance(ctx.obj, CliContext):
        # Pre-built context (e.g. an injected dispatcher); only fill in options
        cli_ctx = ctx.obj
        cli_ctx.config_file = config_file or cli_ctx.config_file
        cli_ctx.instance = instance or cli_ctx.instance
        cli_ctx.access_token = access_token or cli_ctx.access_token
        cli_ctx.verbose = verbose or cli_ctx.verbose
    else:
        ctx.obj = CliContext(
            config_file=config_file,
            instance=instance,
            access_token=access_token,
            verbose=verbose,
        )
    ctx.call_on_close(ctx.obj.close)


cli.add_command(ping_cmd)
cli.add_command(health_cmd)
cli.add_command(read_cmd)
cli.add_command(create_cmd)
cli.add_command(update_cmd)
cli.add_command(delete_cmd)


if __name__ == "__main__":
    cli()

"""Connectivity commands: ping and health."""

import click

from daktela_v6.cli.context import cli_command, get_context
from daktela_v6.cli.output import emit_error, emit_success


@click.command("ping")
@click.pass_context
@cli_command("ping")
def ping_cmd(ctx: click.Context) -> None:
    """Check that the instance answers an authenticated request."""
    cli_ctx = get_context(ctx)
    executor = cli_ctx.dispatcher.executor

    if not executor.ping():
        emit_error(
            f"Instance not reachable: {executor.base_url}",
            code="UNAVAILABLE",
            error_type="unavailable",
            remediation="Check the instance URL, the access token and network access",
            details={"instance": executor.base_url},
        )

    emit_success({"instance": executor.base_url, "reachable": True})


@click.command("health")
@click.pass_context
@cli_command("health")
def health_cmd(ctx: click.Context) -> None:
    """Report health and latency of the instance."""
    cli_ctx = get_context(ctx)
    executor = cli_ctx.dispatcher.executor
    report = executor.health_check()

    if not report.healthy:
        emit_error(
            report.error or f"Instance unhealthy (HTTP {report.status_code})",
            code="UNAVAILABLE",
            error_type="unavailable",
            details={"instance": executor.base_url, **report.to_dict()},
        )

    emit_success({"instance": executor.base_url, **report.to_dict()})

"""CLI commands."""

from daktela_v6.cli.commands.health import health_cmd, ping_cmd
from daktela_v6.cli.commands.records import create_cmd, delete_cmd, read_cmd, update_cmd

__all__ = [
    "ping_cmd",
    "health_cmd",
    "read_cmd",
    "create_cmd",
    "update_cmd",
    "delete_cmd",
]

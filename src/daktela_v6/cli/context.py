"""Shared CLI state and the error-handling command decorator."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

import click

from daktela_v6.cli.output import emit_error
from daktela_v6.config import ClientConfig
from daktela_v6.core.dispatcher import Dispatcher
from daktela_v6.core.errors import DaktelaError, error_to_dict

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CliContext:
    """Options of the root command plus the lazily built dispatcher."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        instance: Optional[str] = None,
        access_token: Optional[str] = None,
        verbose: bool = False,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.config_file = config_file
        self.instance = instance
        self.access_token = access_token
        self.verbose = verbose
        self._dispatcher = dispatcher

    def load_config(self) -> ClientConfig:
        config = ClientConfig.from_env(
            self.config_file,
            overrides={"instance": self.instance, "access_token": self.access_token},
        )
        if self.verbose:
            config.log_level = "DEBUG"
        return config

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            config = self.load_config()
            config.setup_logging()
            self._dispatcher = config.build_dispatcher()
        return self._dispatcher

    def close(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.close()


def get_context(ctx: click.Context) -> CliContext:
    obj = ctx.find_object(CliContext)
    if obj is None:
        obj = ctx.ensure_object(CliContext)
    return obj


def cli_command(name: str) -> Callable[[F], F]:
    """Convert connector exceptions raised by a command into JSON errors."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except DaktelaError as e:
                logger.debug("Command %s failed: %s", name, e)
                payload = error_to_dict(e) or {
                    "error_code": "REQUEST_FAILED",
                    "error_type": "transport",
                }
                details = {
                    key: value
                    for key, value in payload.items()
                    if key not in {"error_code", "error_type", "message"}
                }
                emit_error(
                    str(e),
                    code=payload["error_code"],
                    error_type=payload["error_type"],
                    details=details,
                    meta={"command": name},
                )
            except ValueError as e:
                emit_error(
                    str(e),
                    code="VALIDATION_ERROR",
                    error_type="validation",
                    meta={"command": name},
                )

        return wrapper  # type: ignore[return-value]

    return decorator

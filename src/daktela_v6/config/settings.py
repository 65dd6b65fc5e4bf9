"""ClientConfig dataclass and runtime construction helpers.

This module defines the ``ClientConfig`` class (field declarations, logging
setup and factories for the executor and dispatcher). Loading and validation
logic lives in the ``_ClientConfigLoader`` mixin (``loader.py``).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from daktela_v6.config.loader import _ClientConfigLoader
from daktela_v6.core.dispatcher import Dispatcher
from daktela_v6.core.http.executor import DEFAULT_TIMEOUT, AuthMode, RequestExecutor
from daktela_v6.core.http.rate_limit import RateLimitPolicy
from daktela_v6.core.http.retry import RetryPolicy


@dataclass
class ClientConfig(_ClientConfigLoader):
    """Connection settings with support for env vars and TOML overrides."""

    # Connection
    instance: Optional[str] = None
    access_token: Optional[str] = None
    auth_mode: str = "header"
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    user_agent_suffix: Optional[str] = None

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = False

    # Resilience (None disables the behaviour)
    retry: Optional[RetryPolicy] = None
    rate_limit: Optional[RateLimitPolicy] = None

    def __repr__(self) -> str:
        token = "****" if self.access_token else None
        return (
            f"ClientConfig(instance={self.instance!r}, access_token={token!r}, "
            f"auth_mode={self.auth_mode!r}, timeout={self.timeout!r})"
        )

    def build_executor(self, **overrides) -> RequestExecutor:
        """Create a RequestExecutor from these settings.

        Keyword overrides are passed straight to RequestExecutor (e.g. a
        custom ``http_client`` or ``sleep_func``).
        """
        self._validate()
        options = {
            "request_timeout": self.timeout,
            "auth_mode": AuthMode.QUERY if self.auth_mode == "query" else AuthMode.HEADER,
            "verify_ssl": self.verify_ssl,
            "user_agent_suffix": self.user_agent_suffix,
            "retry_policy": self.retry,
            "rate_limit_policy": self.rate_limit,
        }
        options.update(overrides)
        return RequestExecutor(self.instance, self.access_token, **options)

    def build_dispatcher(self, **overrides) -> Dispatcher:
        return Dispatcher(self.build_executor(**overrides))

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            # JSON-style structured logging
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("daktela_v6")
        root_logger.setLevel(level)
        root_logger.addHandler(handler)

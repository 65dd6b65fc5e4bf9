"""ClientConfig loading and validation logic.

Provides ``_ClientConfigLoader``, a mixin whose methods are inherited by
``ClientConfig`` (defined in ``settings.py``). Loading and validation live
here so ``settings.py`` stays focused on fields and runtime construction.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

from pydantic import ValidationError

if TYPE_CHECKING:
    from daktela_v6.config.settings import ClientConfig

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from daktela_v6.config.parsing import (
    _normalize_log_level,
    _parse_auth_mode,
    _parse_bool,
    _try_parse_bool,
    _try_parse_float,
    _try_parse_int,
)
from daktela_v6.core.errors import ConfigNotFoundError
from daktela_v6.core.http.rate_limit import RateLimitPolicy
from daktela_v6.core.http.retry import RetryPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "DAKTELA_CONFIG_FILE"
PROJECT_CONFIG_NAME = "daktela.toml"


class _ClientConfigLoader:
    """Mixin providing config-loading methods for ``ClientConfig``."""

    if TYPE_CHECKING:
        instance: Optional[str]
        access_token: Optional[str]
        auth_mode: str
        timeout: float
        verify_ssl: bool
        user_agent_suffix: Optional[str]
        log_level: str
        structured_logging: bool
        retry: Optional[RetryPolicy]
        rate_limit: Optional[RateLimitPolicy]

    @classmethod
    def from_env(
        cls,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ClientConfig":
        """
        Create configuration from environment variables and TOML files.

        Priority (highest to lowest):
        0. Explicit ``overrides`` (non-None values only, e.g. CLI options)
        1. Environment variables (DAKTELA_*)
        2. Explicit config file (argument or DAKTELA_CONFIG_FILE)
        3. Project TOML config (./daktela.toml)
        4. XDG config (~/.config/daktela/config.toml)
        5. Default values

        Raises:
            ConfigNotFoundError: Instance or access token is missing.
        """
        config = cls()

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        xdg_config = Path(xdg_config_home) / "daktela" / "config.toml"
        if xdg_config.exists():
            config._load_toml(xdg_config)
            logger.debug("Loaded XDG config from %s", xdg_config)

        project_config = Path(PROJECT_CONFIG_NAME)
        if project_config.exists():
            config._load_toml(project_config)
            logger.debug("Loaded project config from %s", project_config)

        override = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if override:
            config._load_toml(Path(override))

        config._load_env()
        for key, value in (overrides or {}).items():
            if value is not None:
                setattr(config, key, value)
        config._validate()

        return cast("ClientConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load the ``[daktela]`` table from a TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Error loading config file %s: %s", path, e)
            return

        section = data.get("daktela")
        if not isinstance(section, dict):
            return

        if "instance" in section:
            self.instance = str(section["instance"])
        if "access_token" in section:
            self.access_token = str(section["access_token"])
        if "auth_mode" in section:
            mode = _parse_auth_mode(section["auth_mode"])
            if mode is not None:
                self.auth_mode = mode
        if "timeout" in section:
            timeout = _try_parse_float(section["timeout"], name="timeout")
            if timeout is not None:
                self.timeout = timeout
        if "verify_ssl" in section:
            self.verify_ssl = _parse_bool(section["verify_ssl"])
        if "user_agent_suffix" in section:
            self.user_agent_suffix = str(section["user_agent_suffix"])
        if "log_level" in section:
            self.log_level = _normalize_log_level(str(section["log_level"]))
        if "structured_logging" in section:
            self.structured_logging = _parse_bool(section["structured_logging"])

        if isinstance(section.get("retry"), dict):
            self.retry = _policy_from_table(RetryPolicy, section["retry"], source=f"{path}: [daktela.retry]")
        if isinstance(section.get("rate_limit"), dict):
            self.rate_limit = _policy_from_table(
                RateLimitPolicy, section["rate_limit"], source=f"{path}: [daktela.rate_limit]"
            )

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if instance := os.environ.get("DAKTELA_INSTANCE"):
            self.instance = instance

        if token := os.environ.get("DAKTELA_ACCESSTOKEN"):
            self.access_token = token

        if auth_mode := os.environ.get("DAKTELA_AUTH_MODE"):
            mode = _parse_auth_mode(auth_mode)
            if mode is not None:
                self.auth_mode = mode

        if timeout_raw := os.environ.get("DAKTELA_TIMEOUT"):
            timeout = _try_parse_float(timeout_raw, name="DAKTELA_TIMEOUT")
            if timeout is not None:
                self.timeout = timeout

        if verify := os.environ.get("DAKTELA_VERIFY_SSL"):
            parsed = _try_parse_bool(verify)
            if parsed is not None:
                self.verify_ssl = parsed

        if suffix := os.environ.get("DAKTELA_USER_AGENT_SUFFIX"):
            self.user_agent_suffix = suffix

        if level := os.environ.get("DAKTELA_LOG_LEVEL"):
            self.log_level = _normalize_log_level(level)

        if max_retries_raw := os.environ.get("DAKTELA_MAX_RETRIES"):
            max_retries = _try_parse_int(max_retries_raw, name="DAKTELA_MAX_RETRIES")
            if max_retries is not None and max_retries >= 0:
                base = self.retry or RetryPolicy()
                self.retry = base.model_copy(update={"max_retries": max_retries})

        if auto_retry_raw := os.environ.get("DAKTELA_RATE_LIMIT_AUTO_RETRY"):
            auto_retry = _try_parse_bool(auto_retry_raw)
            if auto_retry is not None:
                base_rl = self.rate_limit or RateLimitPolicy()
                self.rate_limit = base_rl.model_copy(update={"auto_retry": auto_retry})

    def _validate(self) -> None:
        if not self.instance:
            raise ConfigNotFoundError("Daktela instance not found in settings")
        if not self.access_token:
            raise ConfigNotFoundError("Daktela access token not found in settings")


def _policy_from_table(model: Any, table: Dict[str, Any], *, source: str) -> Any:
    """Build a policy from a TOML table; ``enabled = false`` yields None."""
    options = dict(table)
    enabled = options.pop("enabled", True)
    if not _parse_bool(enabled):
        return None
    try:
        return model(**options)
    except ValidationError as e:
        logger.warning("Ignoring invalid %s: %s", source, e)
        return model()

"""Configuration for the Daktela V6 connector.

Usage:
    from daktela_v6.config import ClientConfig

    config = ClientConfig.from_env()
    dispatcher = config.build_dispatcher()
"""

from daktela_v6.config.loader import CONFIG_FILE_ENV_VAR
from daktela_v6.config.settings import ClientConfig

__all__ = [
    "ClientConfig",
    "CONFIG_FILE_ENV_VAR",
]

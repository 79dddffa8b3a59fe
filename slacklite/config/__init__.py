from __future__ import annotations

from slacklite.config.loader import load_config
from slacklite.config.schema import AppConfig, GatewayConfig, SlackConfig

__all__ = [
    "AppConfig",
    "GatewayConfig",
    "SlackConfig",
    "load_config",
]

"""Configuration and logging setup."""

from bim_bridge.config.bridge import BridgeConfig
from bim_bridge.config.log_setup import configure_logging

__all__ = ["BridgeConfig", "configure_logging"]

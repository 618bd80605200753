"""Services layer - providers, transport, caching, navigation and vocabulary."""

from glossia.services.logging_config import LoggingConfig, init_logging, log_shutdown, log_startup
from glossia.services.settings_manager import GlossiaSettings, SettingsManager

__all__ = [
    "GlossiaSettings",
    "SettingsManager",
    "LoggingConfig",
    "init_logging",
    "log_startup",
    "log_shutdown",
]

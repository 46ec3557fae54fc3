"""Configuration for the risk engine."""

from .log_setup import configure_logging
from .settings import LoggingSettings, RiskSettings, Settings, StoreSettings
from .settings_store import SettingsStore

__all__ = [
    "LoggingSettings",
    "RiskSettings",
    "Settings",
    "SettingsStore",
    "StoreSettings",
    "configure_logging",
]

"""Configuration models for the risk engine."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RiskSettings(BaseModel):
    """User-level risk configuration.

    Loaded and saved as a whole record. Missing fields fall back to the
    defaults below, and the persisted camelCase keys (``dailyLossLimitPct``,
    ``mdlPercent``...) are accepted alongside the field names. The record is
    frozen: only an explicit user update produces a new one.

    Attributes:
        daily_loss_limit_pct: Soft daily drawdown ceiling, % of equity.
        max_risk_per_trade_pct: Per-trade risk budget, % of equity.
        max_leverage: Highest leverage a trade may use.
        enable_tilt_alerts: Whether the UI raises tilt alerts.
        audio_alerts: Whether alerts play a sound. No effect on admission.
        mdl_percent: Maximum Daily Loss, % of starting capital.
        ml_percent: Maximum Loss, % of starting capital.
        enforce_prop_firm_limits: Whether MDL/ML breaches are enforced.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    daily_loss_limit_pct: float = Field(default=3.0, ge=0, le=100)
    max_risk_per_trade_pct: float = Field(default=1.0, ge=0, le=100)
    max_leverage: float = Field(default=25.0, ge=1)
    enable_tilt_alerts: bool = True
    audio_alerts: bool = False
    mdl_percent: float = Field(default=5.0, ge=0, le=100)
    ml_percent: float = Field(default=10.0, ge=0, le=100)
    enforce_prop_firm_limits: bool = True

    @classmethod
    def from_blob(cls, blob: str | bytes | Mapping[str, Any] | None) -> "RiskSettings":
        """Merge a persisted settings record onto the defaults.

        Args:
            blob: Serialized JSON, an already decoded mapping, or None.

        Returns:
            RiskSettings with every missing field set to its default.

        Raises:
            pydantic.ValidationError: If the blob is not valid JSON or holds
                out-of-range values.
        """
        if blob is None:
            return cls()
        if isinstance(blob, (str, bytes)):
            return cls.model_validate_json(blob)
        return cls.model_validate(dict(blob))

    def to_blob(self) -> str:
        """Serialize the record with the persisted camelCase keys."""
        return self.model_dump_json(by_alias=True)

    def with_updates(self, **changes: Any) -> "RiskSettings":
        """Return a new validated record with ``changes`` applied.

        Args:
            **changes: Field names mapped to their new values.

        Raises:
            pydantic.ValidationError: If a new value is out of range.
        """
        return type(self).model_validate({**self.model_dump(), **changes})


class StoreSettings(BaseSettings):
    """Where per-user settings blobs are kept."""

    model_config = SettingsConfigDict(env_prefix="RISKFIRST_STORE_")

    data_dir: str = "data/risk_settings"


class LoggingSettings(BaseSettings):
    """Logging output configuration."""

    model_config = SettingsConfigDict(env_prefix="RISKFIRST_LOG_")

    level: str = "INFO"
    format: str = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


class Settings(BaseModel):
    """Top-level engine configuration."""

    risk: RiskSettings = Field(default_factory=RiskSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file; env vars fill what the file leaves out."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        store = StoreSettings(**data.pop("store", None) or {})
        logging_settings = LoggingSettings(**data.pop("logging", None) or {})

        return cls(
            **data,
            store=store,
            logging=logging_settings,
        )

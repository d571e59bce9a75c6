"""
Centralized settings and path configuration for the quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = "QUOTE_TOOL_"


def get_package_root() -> Path:
    """Get the quote_tool package directory."""
    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Settings:
    """Application settings with sensible defaults."""

    # Catalog used to seed the in-memory product repository
    catalog_path: Optional[Path] = None

    # Volume discount
    volume_discount_threshold: int = 50
    volume_discount_rate: float = 0.15

    # Urgency fee (delivery requested inside the window)
    urgency_window_days: int = 7
    urgency_fee_rate: float = 0.20

    # Industrial products above this voltage need certification
    certification_voltage_threshold: float = 220.0

    log_level: str = "INFO"

    @classmethod
    def load(cls, environ: Optional[dict] = None) -> 'Settings':
        """Load settings, applying QUOTE_TOOL_* environment overrides."""
        env = os.environ if environ is None else environ

        def read(name: str, default, cast):
            raw = env.get(ENV_PREFIX + name)
            if raw is None or str(raw).strip() == '':
                return default
            return cast(str(raw).strip())

        default_catalog = get_package_root() / 'data' / 'products.csv'

        return cls(
            catalog_path=read('CATALOG', default_catalog, Path),
            volume_discount_threshold=read('VOLUME_THRESHOLD', cls.volume_discount_threshold, int),
            volume_discount_rate=read('VOLUME_RATE', cls.volume_discount_rate, float),
            urgency_window_days=read('URGENCY_WINDOW_DAYS', cls.urgency_window_days, int),
            urgency_fee_rate=read('URGENCY_RATE', cls.urgency_fee_rate, float),
            certification_voltage_threshold=read(
                'CERTIFICATION_VOLTAGE', cls.certification_voltage_threshold, float
            ),
            log_level=read('LOG_LEVEL', cls.log_level, str.upper),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings

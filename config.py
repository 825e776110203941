"""
Configuration loading for Warikan Ledger
"""
from __future__ import annotations
import json
import logging
import math
import os
from dataclasses import asdict, dataclass

from errors import ConfigError
from utils import app_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppSettings:
    """User-tunable settings"""
    currency_symbol: str = "¥"
    decimals: int = 2  # smallest currency unit, 2 -> cents
    default_weight: float = 1.0
    min_weight: float = 0.1  # weight floor; lower values are clamped
    tolerance: float = 1e-9  # balances closer than this are treated as equal
    log_level: str = "INFO"


def settings_from_dict(d: dict) -> AppSettings:
    """Build AppSettings from a dictionary, validating each value"""
    defaults = AppSettings()
    unknown = set(d) - set(asdict(defaults))
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))

    try:
        decimals = int(d.get("decimals", defaults.decimals))
        default_weight = float(d.get("default_weight", defaults.default_weight))
        min_weight = float(d.get("min_weight", defaults.min_weight))
        tolerance = float(d.get("tolerance", defaults.tolerance))
    except (TypeError, ValueError) as ex:
        raise ConfigError(f"invalid numeric setting: {ex}") from ex

    if decimals < 0:
        raise ConfigError("decimals must be >= 0")
    if not math.isfinite(min_weight) or min_weight <= 0:
        raise ConfigError("min_weight must be a positive number")
    if not math.isfinite(default_weight) or default_weight < min_weight:
        raise ConfigError("default_weight must be >= min_weight")
    if not math.isfinite(tolerance) or tolerance <= 0:
        raise ConfigError("tolerance must be a positive number")

    log_level = str(d.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    return AppSettings(
        currency_symbol=str(d.get("currency_symbol", defaults.currency_symbol)),
        decimals=decimals,
        default_weight=default_weight,
        min_weight=min_weight,
        tolerance=tolerance,
        log_level=log_level,
    )


def settings_to_dict(settings: AppSettings) -> dict:
    """Convert AppSettings to dictionary for JSON serialization"""
    return asdict(settings)


def load_settings(path: str) -> AppSettings:
    """Load settings from JSON file, falling back to defaults when the file is missing"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return AppSettings()
    except json.JSONDecodeError as ex:
        raise ConfigError(f"{path}: {ex}") from ex
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return settings_from_dict(data)


def get_default_settings() -> AppSettings:
    """Load settings.json from the application directory"""
    return load_settings(os.path.join(app_dir(), SETTINGS_FILE))

"""Configuration management for Quarterly Calc.

Settings live in settings.json - machine-specific preferences:
   - tax_year: default tax year for estimates
   - installment_style: 'equal' or 'annualized' (30/30/20/20)
   - ai_categorization: try the Gemini CLI before keyword matching
   - data_dir: custom data directory (expense ledger)

Config directory resolution:
1. QUARTERLY_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/quarterly-calc/ (XDG_CONFIG_HOME fallback)

Data path follows the XDG base directory layout:
- Data: settings.json data_dir, else XDG_DATA_HOME/quarterly-calc/
  or ~/.local/share/quarterly-calc/
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

APP_NAME = "quarterly-calc"
SETTINGS_FILENAME = "settings.json"
LEDGER_FILENAME = "expenses.json"

INSTALLMENT_STYLES = ("equal", "annualized")

# Known settings and a validator/coercer for each
_SETTING_PARSERS = {
    "tax_year": lambda v: _parse_year(v),
    "installment_style": lambda v: _parse_choice(v, INSTALLMENT_STYLES),
    "ai_categorization": lambda v: _parse_bool(v),
    "data_dir": lambda v: str(Path(v).expanduser()),
}


def _parse_year(value: Any) -> int:
    text = str(value)
    if not text.isdigit() or len(text) != 4:
        raise ValueError(f"Invalid year '{value}'. Must be 4 digits.")
    return int(text)


def _parse_choice(value: Any, choices: tuple) -> str:
    if value not in choices:
        raise ValueError(f"Invalid value '{value}'. Must be one of: {', '.join(choices)}")
    return value


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "1", "on"):
        return True
    if text in ("false", "no", "0", "off"):
        return False
    raise ValueError(f"Invalid boolean '{value}'. Use true or false.")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. QUARTERLY_CALC_CONFIG_PATH environment variable
    2. ~/.config/quarterly-calc/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("QUARTERLY_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        ValueError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        try:
            settings = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {settings_file}: {e}") from e

    if not isinstance(settings, dict):
        raise ValueError(f"{settings_file} must contain a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    logger.debug(f"Saved settings to {settings_file}")
    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json, or default if unset."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Validate and set a setting value in settings.json.

    Raises:
        ValueError: If the key is unknown or the value invalid
    """
    if key not in _SETTING_PARSERS:
        raise ValueError(
            f"Unknown setting '{key}'. Known settings: {', '.join(sorted(_SETTING_PARSERS))}"
        )
    settings = load_settings()
    settings[key] = _SETTING_PARSERS[key](value)
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def known_settings() -> list[str]:
    return sorted(_SETTING_PARSERS)


def get_data_path() -> Path:
    """Get the data directory path.

    Resolution order:
    1. settings.json data_dir
    2. XDG_DATA_HOME/quarterly-calc/ or ~/.local/share/quarterly-calc/
    """
    custom = get_setting("data_dir")
    if custom:
        return Path(custom).expanduser()

    xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    return Path(xdg_data_home) / APP_NAME


def get_ledger_path() -> Path:
    """Default location of the expense ledger JSON file."""
    return get_data_path() / LEDGER_FILENAME


def get_default_installment_weighted() -> bool:
    """True when settings select the annualized installment split."""
    return get_setting("installment_style", "equal") == "annualized"

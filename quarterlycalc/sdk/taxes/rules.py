"""Tax rules loading from tax_rules/YYYY.yaml."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Union

import yaml

from .schemas import TaxRules

logger = logging.getLogger(__name__)


class TaxRulesNotFoundError(FileNotFoundError):
    """Raised when no tax rules file exists for a requested year."""
    pass


def _get_tax_rules_dir() -> Path:
    """Get the tax_rules directory path."""
    return Path(__file__).parent.parent / "tax_rules"  # taxes -> sdk


def get_available_years() -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def load_tax_rules_file(path: Union[str, Path]) -> TaxRules:
    """Load and validate a tax rules YAML file from an arbitrary path.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the table is malformed (e.g. brackets
            that do not cover [0, inf))
    """
    path = Path(path)
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    return TaxRules.model_validate(raw)


@lru_cache(maxsize=None)
def _load_cached(year: str) -> TaxRules:
    config_file = _get_tax_rules_dir() / f"{year}.yaml"
    if not config_file.exists():
        available = ", ".join(str(y) for y in get_available_years()) or "none"
        raise TaxRulesNotFoundError(
            f"Tax rules file not found for year {year}: {config_file} (available: {available})"
        )
    logger.debug(f"Loading tax rules from {config_file}")
    rules = load_tax_rules_file(config_file)
    if str(rules.year) != year:
        raise ValueError(f"{config_file.name} declares year {rules.year}, expected {year}")
    return rules


def load_tax_rules(year: Union[str, int]) -> TaxRules:
    """Load tax rules for a specific year from tax_rules/YYYY.yaml (cached)."""
    year = str(year)
    if not year.isdigit() or len(year) != 4:
        raise ValueError(f"Invalid year '{year}'. Must be 4 digits.")
    return _load_cached(year)


def get_latest_year() -> int:
    """Most recent year that has a tax rules file."""
    years = get_available_years()
    if not years:
        raise TaxRulesNotFoundError(f"No tax rules files found in {_get_tax_rules_dir()}")
    return years[0]

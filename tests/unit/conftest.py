"""Shared fixtures for unit tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from quarterlycalc.sdk import load_tax_rules


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point settings and data at a temp dir so tests never read real user config."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()
    monkeypatch.setenv("QUARTERLY_CALC_CONFIG_PATH", str(config_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))
    return config_dir


@pytest.fixture
def rules_2025():
    return load_tax_rules(2025)


@pytest.fixture
def gemini_installed(monkeypatch):
    """Pretend the gemini CLI is on PATH; tests still patch process_prompt."""
    from quarterlycalc import gemini_client
    monkeypatch.setattr(gemini_client, "is_available", lambda: True)

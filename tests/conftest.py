"""
Pytest configuration and shared fixtures for codec tests.
"""
from pathlib import Path

import pytest

from nestcodec.configuration import _load_config
from nestcodec.interchange import loads
from nestcodec.structures import TranslationEntry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    """Read a golden file exactly as stored on disk"""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def simple_format_fixture():
    """Flat translation set matching simple-nested.yaml"""
    return loads(load_fixture("simple-format.json"))


@pytest.fixture
def scenario_entries():
    """Entries of the plan/greeting/export scenario"""
    return [
        TranslationEntry("term.one", "Current Plan: {{ project.plan.name }}"),
        TranslationEntry("term two", "hello there, all good?"),
        TranslationEntry("TERM_THREE", "Export format..."),
    ]


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Isolate configuration from the developer's home and environment"""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in ("NESTCODEC_DEBUG", "NESTCODEC_ENCODING", "NESTCODEC_JSON_INDENT"):
        monkeypatch.delenv(key, raising=False)
    _load_config.cache_clear()
    yield tmp_path
    _load_config.cache_clear()

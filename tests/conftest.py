"""Shared test fixtures for docdelta."""

import os
from pathlib import Path

import pytest

from docdelta.config import AnalysisConfig


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def write_tree(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> str or bytes) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep user and working-directory config files out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(home)
    for key in list(os.environ):
        if key.startswith("DOCDELTA_"):
            monkeypatch.delenv(key)


@pytest.fixture
def project(tmp_path):
    """Factory: build a project tree under tmp_path/project and return its root."""
    root = tmp_path / "project"
    root.mkdir()

    def _make(files: dict) -> Path:
        return write_tree(root, files)

    return _make


@pytest.fixture
def no_cache_config():
    return AnalysisConfig(cache_enabled=False)

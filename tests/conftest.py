"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def bench_config(tmp_path: Path):
    """Config pointing at a fresh SQLite file under tmp_path."""
    from core.config import BenchConfig, default_database_url

    return BenchConfig(data_root=tmp_path, database_url=default_database_url(tmp_path))


@pytest.fixture
def bench_client(bench_config):
    """SDK client with an initialized empty database."""
    from store.bench_sdk import BenchClient

    client = BenchClient(bench_config)
    yield client
    client.database.dispose()

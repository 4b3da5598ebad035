"""Pytest configuration: import paths and an isolated state database per test."""

import os
import sys
from pathlib import Path

import pytest

# src 配下のパッケージと tests.factories を解決できるようにパスを調整。
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(PROJECT_ROOT / "src"))

# 設定は import 時に読まれるため、実データを汚さないよう先に既定値を与える。
os.environ.setdefault("STATE_DB_PATH", str(PROJECT_ROOT / ".pytest_state" / "state.sqlite3"))
os.environ.setdefault("STRICT_MODE", "true")


@pytest.fixture
def rng():
    import random

    return random.Random(20260301)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "state" / "japanese_srs.sqlite3")

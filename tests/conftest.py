"""
Pytest configuration.

Every test gets its own data directory under tmp_path and a Config built
explicitly, so nothing depends on the developer's environment or .env file.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from taskboard.api.server import create_app
from taskboard.config import Config
from taskboard.store import Store


SEED_EMAIL = "root@example.com"
SEED_PASSWORD = "rootpass"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def cfg(tmp_path: Path) -> Config:
    return Config(
        DATA_DIR=str(tmp_path / "data"),
        CLIENT_ORIGINS="http://localhost:5173",
        ADMIN_EMAIL=SEED_EMAIL,
        ADMIN_PASSWORD=SEED_PASSWORD,
        ADMIN_NAME="Root",
    )


@pytest.fixture()
def store(cfg: Config) -> Store:
    return Store(cfg.DATA_DIR)


@pytest.fixture()
def app(cfg: Config):
    return create_app(cfg)

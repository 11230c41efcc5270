"""Shared fixtures: an isolated config, app and HTTP client per test."""

import pytest
from fastapi.testclient import TestClient

from nebula.catalog.assets import AssetDirectoryManager
from nebula.catalog.models import CatalogRecord
from nebula.catalog.store import CatalogStore
from nebula.config import DatabaseConfig, MarketplaceConfig, NebulaConfig, ServerConfig
from web.backend.app.main import create_app

PSK = "test-psk"


def make_record(name: str = "pkg-1", **overrides) -> CatalogRecord:
    fields = {
        "package_name": name,
        "title": overrides.pop("title", f"Package {name}"),
        "type": overrides.pop("type", "theme"),
        "payload": overrides.pop("payload", "style.css"),
        "image": overrides.pop("image", "preview.png"),
    }
    fields.update(overrides)
    return CatalogRecord(**fields)


@pytest.fixture
def config(tmp_path) -> NebulaConfig:
    return NebulaConfig(
        server=ServerConfig(assets_dir=str(tmp_path / "assets")),
        db=DatabaseConfig(path=str(tmp_path / "catalog.sqlite")),
        marketplace=MarketplaceConfig(enabled=True, psk=PSK),
    )


@pytest.fixture
def store(config) -> CatalogStore:
    store = CatalogStore(config.db.path)
    store.initialize()
    return store


@pytest.fixture
def assets(config) -> AssetDirectoryManager:
    assets = AssetDirectoryManager(config.server.assets_dir)
    assets.initialize()
    return assets


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

"""Tests for seeding the catalog from YAML."""

import pytest
import yaml

from nebula.catalog.models import PackageType
from nebula.catalog.seed import load_seed_file, seed_catalog
from nebula.errors import BadRequestError, ConfigError

from conftest import make_record


def _write_seed(tmp_path, packages) -> str:
    path = tmp_path / "seed.yaml"
    path.write_text(yaml.dump({"packages": packages}))
    return str(path)


def test_seed_creates_records_and_directories(tmp_path, store, assets):
    path = _write_seed(
        tmp_path,
        [
            {"uuid": "aurora", "title": "Aurora", "type": "theme", "payload": "a.css"},
            {"uuid": "filter", "title": "Filter", "type": "plugin-sw", "payload": "sw.js"},
        ],
    )
    created = seed_catalog(store, assets, load_seed_file(path))

    assert created == ["aurora", "filter"]
    assert store.get("filter").type is PackageType.plugin_sw
    assert assets.exists("aurora") and assets.exists("filter")


def test_seed_is_idempotent(tmp_path, store, assets):
    path = _write_seed(tmp_path, [{"uuid": "aurora", "title": "Aurora", "payload": "a.css"}])
    seed_catalog(store, assets, load_seed_file(path))
    assert seed_catalog(store, assets, load_seed_file(path)) == []
    assert store.count() == 1


def test_seed_rejects_bad_entries(tmp_path):
    for packages in (
        [{"title": "no id"}],
        [{"uuid": "x", "title": "X", "payload": "x.css", "type": "extension"}],
        [{"uuid": "x", "title": "X", "payload": "x.css", "tags": 5}],
        ["not a mapping"],
    ):
        with pytest.raises(ConfigError):
            load_seed_file(_write_seed(tmp_path, packages))


def test_seed_file_rejects_invalid_or_incomplete_entries(tmp_path):
    for packages in (
        [{"uuid": "../evil", "title": "Evil", "payload": "e.css"}],
        [{"uuid": "aurora", "title": None, "payload": "a.css"}],
        [{"uuid": "aurora", "title": "Aurora", "payload": ""}],
    ):
        with pytest.raises(ConfigError):
            load_seed_file(_write_seed(tmp_path, packages))


def test_seed_rejects_invalid_identifier_without_writing(store, assets):
    with pytest.raises(BadRequestError):
        seed_catalog(store, assets, [make_record("../evil")])
    assert store.count() == 0


def test_seed_rolls_back_record_when_directory_fails(store, assets, monkeypatch):
    def fail(name):
        raise PermissionError(name)

    monkeypatch.setattr(assets, "create", fail)
    with pytest.raises(PermissionError):
        seed_catalog(store, assets, [make_record("aurora")])
    assert store.get("aurora") is None


def test_app_seeds_on_startup(tmp_path, config):
    from dataclasses import replace

    from fastapi.testclient import TestClient

    from web.backend.app.main import create_app

    path = _write_seed(tmp_path, [{"uuid": "aurora", "title": "Aurora", "payload": "a.css"}])
    app = create_app(replace(config, db=replace(config.db, seed_file=path)))
    resp = TestClient(app).get("/api/packages/aurora")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Aurora"

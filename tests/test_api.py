"""End-to-end tests for the marketplace HTTP endpoints."""

from dataclasses import replace

from fastapi.testclient import TestClient

from nebula.config import MarketplaceConfig
from web.backend.app.main import create_app

from conftest import PSK, make_record


def _create(client, uuid="pkg-1", psk=PSK, **fields):
    body = {"uuid": uuid, "title": "Aurora", "type": "theme", "payload": "aurora.css"}
    body.update(fields)
    return client.post("/api/create-package", json=body, headers={"psk": psk})


def _upload(client, package="pkg-1", name="aurora.css", data=b"body{}", psk=PSK):
    headers = {"psk": psk}
    if package is not None:
        headers["packagename"] = package
    return client.post("/api/upload-asset", headers=headers, files={"file": (name, data)})


# --- Meta ---


def test_health(client):
    resp = client.get("/api")
    assert resp.status_code == 200
    assert resp.json() == {"Server": "Active"}


# --- Read endpoints ---


def test_create_then_read_back(client):
    resp = _create(
        client,
        description="Northern lights",
        author="nebula",
        image="preview.png",
        version="1.0.0",
        tags={"style": "dark"},
        background_video="aurora.mp4",
    )
    assert resp.status_code == 200
    assert resp.json() == {"status": "Package created successfully!"}

    pkg = client.get("/api/packages/pkg-1")
    assert pkg.status_code == 200
    assert pkg.json() == {
        "title": "Aurora",
        "description": "Northern lights",
        "image": "preview.png",
        "author": "nebula",
        "tags": {"style": "dark"},
        "version": "1.0.0",
        "background_image": None,
        "background_video": "aurora.mp4",
        "payload": "aurora.css",
        "type": "theme",
    }

    listing = client.get("/api/catalog-assets/", params={"page": 1})
    assert listing.status_code == 200
    data = listing.json()
    assert data["pages"] == 1
    assert data["assets"]["pkg-1"]["title"] == "Aurora"


def test_unknown_package_is_404(client):
    resp = client.get("/api/packages/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Package not found!"}


def test_listing_pages(client, store):
    for i in range(21):
        store.create(make_record(f"pkg-{i:02d}"))

    first = client.get("/api/catalog-assets/").json()
    second = client.get("/api/catalog-assets/?page=2").json()
    beyond = client.get("/api/catalog-assets/?page=9").json()

    assert first["pages"] == second["pages"] == beyond["pages"] == 2
    assert len(first["assets"]) == 20
    assert list(second["assets"]) == ["pkg-20"]
    assert beyond["assets"] == {}


def test_listing_huge_page_is_empty(client, store):
    store.create(make_record("pkg-1"))
    resp = client.get("/api/catalog-assets/?page=99999999999999999999")
    assert resp.status_code == 200
    assert resp.json()["assets"] == {}
    assert resp.json()["pages"] == 1


def test_listing_defaults_unparsable_page_to_one(client, store):
    store.create(make_record("pkg-1"))
    resp = client.get("/api/catalog-assets/?page=abc")
    assert resp.status_code == 200
    assert "pkg-1" in resp.json()["assets"]


def test_listing_rejects_page_below_one(client):
    for page in ("0", "-3"):
        resp = client.get(f"/api/catalog-assets/?page={page}")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Page must be a positive number!"}


# --- create-package ---


def test_create_conflict(client):
    assert _create(client).status_code == 200
    resp = _create(client, title="Other")
    assert resp.status_code == 409
    assert resp.json() == {"status": "Package already exists!"}
    assert client.get("/api/packages/pkg-1").json()["title"] == "Aurora"
    assert client.get("/api/catalog-assets/").json()["pages"] == 1


def test_create_wrong_psk(client):
    resp = _create(client, psk="nope")
    assert resp.status_code == 403
    assert resp.json() == {"status": "PSK isn't correct!"}


def test_create_checks_psk_before_body(client):
    resp = client.post("/api/create-package", json={}, headers={"psk": "nope"})
    assert resp.status_code == 403


def test_create_malformed_json_is_400_before_psk(client):
    resp = client.post(
        "/api/create-package",
        content=b"{not json",
        headers={"psk": "nope", "content-type": "application/json"},
    )
    assert resp.status_code == 400


def test_create_when_disabled(config):
    disabled = replace(config, marketplace=MarketplaceConfig(enabled=False, psk=PSK))
    client = TestClient(create_app(disabled))
    resp = _create(client)
    assert resp.status_code == 500
    assert resp.json() == {"status": "Marketplace is disabled!"}
    assert client.get("/api/packages/pkg-1").status_code == 404


def test_create_rejects_bad_shapes(client):
    for fields in (
        {"tags": "dark"},
        {"tags": [1, 2]},
        {"type": "extension"},
        {"uuid": "../etc"},
        {"payload": ""},
    ):
        resp = _create(client, **fields)
        assert resp.status_code == 400, fields
        assert resp.json()["status"].startswith("Invalid request")


def test_create_accepts_tag_list(client):
    assert _create(client, tags=["dark", "minimal"]).status_code == 200
    assert client.get("/api/packages/pkg-1").json()["tags"] == ["dark", "minimal"]


def test_blank_background_fields_are_null(client):
    _create(client, background_image="", background_video="")
    pkg = client.get("/api/packages/pkg-1").json()
    assert pkg["background_image"] is None
    assert pkg["background_video"] is None


# --- upload-asset ---


def test_upload_and_serve(client, config):
    _create(client)
    resp = _upload(client, data=b"body{color:red}")
    assert resp.status_code == 200
    assert resp.json() == {"status": "File uploaded successfully!"}

    served = client.get("/packages/pkg-1/aurora.css")
    assert served.status_code == 200
    assert served.content == b"body{color:red}"


def test_upload_overwrites(client):
    _create(client)
    _upload(client, data=b"v1")
    _upload(client, data=b"v2")
    assert client.get("/packages/pkg-1/aurora.css").content == b"v2"


def test_upload_unknown_package(client):
    resp = _upload(client, package="missing")
    assert resp.status_code == 500
    assert resp.json() == {"status": "File couldn't be uploaded! (Package most likely doesn't exist)"}


def test_upload_without_package_header(client):
    resp = _upload(client, package=None)
    assert resp.status_code == 400
    assert resp.json() == {"status": "No packagename defined!"}


def test_upload_without_file(client):
    _create(client)
    resp = client.post("/api/upload-asset", headers={"psk": PSK, "packagename": "pkg-1"})
    assert resp.status_code == 400
    assert resp.json() == {"status": "No file uploaded!"}


def test_upload_wrong_psk(client):
    _create(client)
    resp = _upload(client, psk="nope")
    assert resp.status_code == 403

"""Tests for the HTTP server."""

import gzip
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from docserv import index_store
from docserv.config import settings
from docserv.engine.errors import IndexLoadError
from docserv.server import app


@pytest.fixture
def serving_dir(tmp_path: Path, index_file: Path) -> Path:
    page = tmp_path / "Tumbleweed" / "i3wm" / "i3.1.en.html"
    page.parent.mkdir(parents=True)
    page.write_text("<html>i3</html>")

    compressed = tmp_path / "Tumbleweed" / "cronie" / "crontab.5.en.html.gz"
    compressed.parent.mkdir(parents=True)
    compressed.write_bytes(gzip.compress(b"<html>crontab</html>"))
    return tmp_path


@pytest.fixture
def client(serving_dir: Path, monkeypatch):
    monkeypatch.setattr(settings, "serving_dir", serving_dir)
    monkeypatch.setattr(settings, "index_paths", "")
    monkeypatch.setattr(settings, "allow_reload", True)
    with TestClient(app, follow_redirects=False) as c:
        yield c
    assert not index_store.is_loaded()


# ============ HEALTH ============


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready(client: TestClient):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["checks"] == {"index": True, "serving_dir": True}


def test_not_ready_without_serving_dir(client: TestClient, tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "serving_dir", tmp_path / "gone")
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


def test_stats(client: TestClient):
    body = client.get("/-/stats").json()
    assert body["products"] == ["Tumbleweed", "Leap"]
    assert body["manpages"] == 8
    assert body["entries"] == 15


# ============ FILES ============


def test_serves_existing_file(client: TestClient):
    response = client.get("/Tumbleweed/i3wm/i3.1.en.html")
    assert response.status_code == 200
    assert response.text == "<html>i3</html>"


def test_serves_decompressed_file(client: TestClient):
    response = client.get("/Tumbleweed/cronie/crontab.5.en.html")
    assert response.status_code == 200
    assert response.text == "<html>crontab</html>"
    assert response.headers["content-type"].startswith("text/html")


def test_rejects_dotdot(client: TestClient):
    response = client.get("/i3..1")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "invalid URL path"}


def test_directory_without_index(client: TestClient):
    response = client.get("/Tumbleweed/")
    assert response.status_code == 404
    assert response.json()["error"] == "File not found"


# ============ REDIRECTS ============


def test_redirect(client: TestClient):
    response = client.get("/i3(1)", headers={"Accept-Language": "de"})
    assert response.status_code == 302
    assert response.headers["location"] == "/Tumbleweed/i3wm/i3.1.de.html"


def test_redirect_raw(client: TestClient):
    response = client.get("/i3.1.gz")
    assert response.status_code == 302
    assert response.headers["location"] == "/Tumbleweed/i3wm/i3.1.en.gz"


def test_redirect_with_referrer(client: TestClient):
    response = client.get("/crontab", params={"suite": "Leap"})
    assert response.headers["location"] == "/Leap/cronie/crontab.1.en.html"


def test_not_found(client: TestClient):
    response = client.get("/nonexistent(5)")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "No such man page"
    assert body["manpage"] == "nonexistent"
    assert body["choices"] == []


def test_not_found_offers_choices(client: TestClient):
    response = client.get("/systemd.service.8")
    assert response.status_code == 404
    body = response.json()
    assert [c["url"] for c in body["choices"]] == ["/Tumbleweed/systemd/systemd.service.5.en.html"]
    assert body["products"] == ["Tumbleweed", "Leap"]


def test_jump(client: TestClient):
    response = client.get("/jump", params={"q": "i3(1)"})
    assert response.status_code == 302
    assert response.headers["location"] == "/Tumbleweed/i3wm/i3.1.en.html"


def test_jump_without_query(client: TestClient):
    response = client.get("/jump", params={"q": " "})
    assert response.status_code == 400
    assert response.json()["success"] is False


# ============ RELOAD ============


def test_reload(client: TestClient):
    response = client.post("/-/reload")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["stats"]["entries"] == 15


def test_failed_reload_keeps_index(client: TestClient, index_file: Path):
    index_file.write_bytes(b"\x0a\x05ab")

    response = client.post("/-/reload")
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["stats"]["entries"] == 15

    assert client.get("/i3(1)").headers["location"] == "/Tumbleweed/i3wm/i3.1.en.html"


def test_reload_disabled(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "allow_reload", False)
    assert client.post("/-/reload").status_code == 404


# ============ STARTUP ============


def test_refuses_to_start_without_index(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "serving_dir", tmp_path)
    monkeypatch.setattr(settings, "index_paths", str(tmp_path / "missing.idx"))
    with pytest.raises(IndexLoadError):
        with TestClient(app):
            pass

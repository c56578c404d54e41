"""Tests for the process-wide index holder."""

import asyncio
import time
from pathlib import Path

import pytest

from docserv import index_store
from docserv.config import settings
from docserv.engine.errors import IndexLoadError, IndexNotLoaded


@pytest.fixture(autouse=True)
def empty_store():
    index_store.close_index()
    yield
    index_store.close_index()


def test_not_loaded():
    assert not index_store.is_loaded()
    with pytest.raises(IndexNotLoaded):
        index_store.get_redirector()


def test_load(index_file: Path):
    redirector = asyncio.run(index_store.load_index([index_file]))
    assert index_store.get_redirector() is redirector
    assert "i3" in redirector.index.entries


def test_load_failure_keeps_previous_index(index_file: Path, tmp_path: Path):
    previous = asyncio.run(index_store.load_index([index_file]))

    with pytest.raises(IndexLoadError):
        asyncio.run(index_store.load_index([tmp_path / "missing.idx"]))

    assert index_store.get_redirector() is previous


def test_reload_uses_settings(index_file: Path, monkeypatch):
    monkeypatch.setattr(settings, "index_paths", str(index_file))
    redirector = asyncio.run(index_store.reload_index())
    assert index_store.get_redirector() is redirector


def test_reload_failure(index_file: Path, tmp_path: Path, monkeypatch):
    previous = asyncio.run(index_store.load_index([index_file]))
    broken = tmp_path / "broken.idx"
    broken.write_bytes(b"\x0a\x05ab")
    monkeypatch.setattr(settings, "index_paths", f"{index_file}#{broken}")

    with pytest.raises(IndexLoadError):
        asyncio.run(index_store.reload_index())

    assert index_store.get_redirector() is previous


def test_default_index_path(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "serving_dir", tmp_path)
    monkeypatch.setattr(settings, "index_paths", "")
    assert settings.index_path_list == [tmp_path / "auxserver.idx"]


def test_load_timeout_keeps_previous_index(index_file: Path, monkeypatch):
    previous = asyncio.run(index_store.load_index([index_file]))

    load_index_files = index_store.load_index_files

    def slow_load(paths):
        time.sleep(0.5)
        return load_index_files(paths)

    monkeypatch.setattr(index_store, "load_index_files", slow_load)

    with pytest.raises(IndexLoadError, match="timed out"):
        asyncio.run(index_store.load_index([index_file], timeout=0.05))

    assert index_store.get_redirector() is previous

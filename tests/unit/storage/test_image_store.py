# tests/unit/storage/test_image_store.py — v2
"""Tests for image hosting backends."""

from __future__ import annotations

import threading
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import pytest

from checkwise.config.settings import Settings
from checkwise.storage.base_image_store import NullImageStore
from checkwise.storage.local_image_store import LocalImageStore
from checkwise.storage.store_factory import create_image_store


def _path_of(url: str) -> Path:
    return Path(url2pathname(urlparse(url).path))


class TestLocalImageStore:
    @pytest.mark.asyncio
    async def test_store_returns_file_url(self, tmp_path):
        store = LocalImageStore(tmp_path)
        url = await store.store(b"\x89PNG", "Homework.PNG")
        assert url.startswith("file://")
        path = _path_of(url)
        assert path.read_bytes() == b"\x89PNG"
        assert path.name.startswith("check_")
        assert path.suffix == ".png"

    @pytest.mark.asyncio
    async def test_same_millisecond_does_not_overwrite(self, tmp_path):
        store = LocalImageStore(tmp_path)
        urls = [await store.store(bytes([i]), "a.png") for i in range(3)]
        assert len(set(urls)) == 3
        assert len(list(tmp_path.iterdir())) == 3

    @pytest.mark.asyncio
    async def test_creates_root(self, tmp_path):
        store = LocalImageStore(tmp_path / "nested" / "images")
        await store.store(b"x", None)
        assert (tmp_path / "nested" / "images").is_dir()

    @pytest.mark.asyncio
    async def test_write_runs_off_event_loop_thread(self, tmp_path, monkeypatch):
        store = LocalImageStore(tmp_path)
        threads: list[int] = []
        write = store._write

        def recording_write(image_bytes, filename):
            threads.append(threading.get_ident())
            return write(image_bytes, filename)

        monkeypatch.setattr(store, "_write", recording_write)
        url = await store.store(b"x", "a.png")

        assert _path_of(url).read_bytes() == b"x"
        assert threads and threads[0] != threading.get_ident()


class TestNullImageStore:
    @pytest.mark.asyncio
    async def test_empty_url(self):
        assert await NullImageStore().store(b"x", "a.png") == ""


class TestCreateImageStore:
    def test_none(self):
        s = Settings(_env_file=None, image_store_backend="none")
        assert isinstance(create_image_store(s), NullImageStore)

    def test_local(self, tmp_path):
        s = Settings(_env_file=None, image_store_root=tmp_path)
        assert isinstance(create_image_store(s), LocalImageStore)

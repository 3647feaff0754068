from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from services.catalog import CatalogClient
from services.errors import TransportError
from services.image_cache import ImageCache, cache_file_name, file_url, is_expired


class FakeFetcher:
    def __init__(self, payload: bytes = b"\x89PNG", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.urls: list[str] = []

    def __call__(self, url: str) -> bytes:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.payload


def test_cache_file_name_is_stable() -> None:
    url = "https://cdn.test/cards/a.png"
    assert cache_file_name(url) == cache_file_name(url)
    assert cache_file_name(url) == hashlib.sha1(url.encode("utf-8")).hexdigest() + ".png"


def test_query_string_changes_digest_but_not_extension() -> None:
    first = cache_file_name("https://cdn.test/a.jpg?x=1")
    second = cache_file_name("https://cdn.test/a.jpg?x=2")
    assert first != second
    assert first.endswith(".jpg")
    assert second.endswith(".jpg")


def test_missing_extension_defaults_to_img() -> None:
    assert cache_file_name("https://cdn.test/image").endswith(".img")
    assert cache_file_name("https://cdn.test/").endswith(".img")


def test_file_url(tmp_path: Path) -> None:
    url = file_url(tmp_path / "abc.jpg")
    assert url.startswith("file://")
    assert url.endswith("/abc.jpg")


@pytest.mark.parametrize(
    ("age", "expired"),
    [(10, False), (100, True), (60, False), (0, False)],
)
def test_is_expired(age: float, expired: bool) -> None:
    assert is_expired(1000.0 - age, 60, now=1000.0) is expired


def test_future_modification_time_is_expired() -> None:
    assert is_expired(2000.0, 60, now=1000.0)


def _cache(tmp_path: Path, fetcher: FakeFetcher, now: float) -> ImageCache:
    return ImageCache(tmp_path / "images", fetcher, ttl=60, clock=lambda: now)


def test_miss_downloads_and_writes(tmp_path: Path) -> None:
    fetcher = FakeFetcher(b"image-bytes")
    cache = _cache(tmp_path, fetcher, now=1000.0)
    url = "https://cdn.test/a.jpg"
    result = cache.get(url)
    target = cache.path_for(url)
    assert result == file_url(target)
    assert target.read_bytes() == b"image-bytes"
    assert fetcher.urls == [url]
    assert [path.name for path in cache.directory.iterdir()] == [target.name]


def test_fresh_entry_served_without_fetch(tmp_path: Path) -> None:
    fetcher = FakeFetcher()
    cache = _cache(tmp_path, fetcher, now=1000.0)
    url = "https://cdn.test/a.jpg"
    target = cache.path_for(url)
    target.parent.mkdir(parents=True)
    target.write_bytes(b"old")
    os.utime(target, (990.0, 990.0))
    assert cache.get(url) == file_url(target)
    assert fetcher.urls == []
    assert target.read_bytes() == b"old"


def test_expired_entry_is_refreshed(tmp_path: Path) -> None:
    fetcher = FakeFetcher(b"new")
    cache = _cache(tmp_path, fetcher, now=1000.0)
    url = "https://cdn.test/a.jpg"
    target = cache.path_for(url)
    target.parent.mkdir(parents=True)
    target.write_bytes(b"old")
    os.utime(target, (900.0, 900.0))
    assert cache.get(url) == file_url(target)
    assert fetcher.urls == [url]
    assert target.read_bytes() == b"new"


def test_fetch_failure_falls_back_to_remote_url(tmp_path: Path) -> None:
    fetcher = FakeFetcher(error=TransportError("timed out"))
    cache = _cache(tmp_path, fetcher, now=1000.0)
    url = "https://cdn.test/a.jpg"
    assert cache.get(url) is None
    assert cache.resolve(url) == url
    assert not cache.path_for(url).exists()


@pytest.mark.parametrize("url", ["//cdn.test/cards/a.jpg", "https://cdn.test/cards/a b.jpg"])
def test_malformed_picture_url_falls_back_with_real_client(tmp_path: Path, url: str) -> None:
    cache = ImageCache(tmp_path / "images", CatalogClient().get_bytes, ttl=60)
    assert cache.get(url) is None
    assert cache.resolve(url) == url

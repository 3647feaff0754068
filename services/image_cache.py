"""Content-addressed local cache of remote card images."""
from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import time
import urllib.parse
from pathlib import Path, PurePosixPath
from typing import Callable

from launcher_config.constants import CACHE_DEFAULT_EXTENSION, CACHE_TTL_SECONDS
from services.errors import CacheWriteError, FileUrlConversionError, LauncherError

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]


def cache_file_name(url: str) -> str:
    """SHA-1 of the full URL plus the extension of its path component."""
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()
    path = urllib.parse.urlsplit(url.split("?", 1)[0]).path
    suffix = PurePosixPath(path).suffix.lstrip(".")
    return f"{digest}.{suffix or CACHE_DEFAULT_EXTENSION}"


def is_expired(modified: float, ttl: float, now: float | None = None) -> bool:
    current = time.time() if now is None else now
    age = current - modified
    if age < 0:
        return True
    return age > ttl


def file_url(path: Path) -> str:
    try:
        return Path(path).as_uri()
    except ValueError as exc:
        raise FileUrlConversionError() from exc


class ImageCache:
    def __init__(
        self,
        directory: Path,
        fetch: Fetcher,
        *,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._directory = Path(directory)
        self._fetch = fetch
        self._ttl = ttl
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, url: str) -> Path:
        return self._directory / cache_file_name(url)

    def get(self, url: str) -> str | None:
        """Return a ``file://`` URL for ``url`` or ``None`` when caching fails."""
        try:
            return self._get(url)
        except LauncherError as exc:
            logger.debug("Image cache miss for %s: %s", url, exc)
            return None

    def resolve(self, url: str) -> str:
        return self.get(url) or url

    def _get(self, url: str) -> str | None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheWriteError(str(exc)) from exc
        target = self.path_for(url)
        try:
            modified = target.stat().st_mtime
        except OSError:
            modified = None
        if modified is not None and not is_expired(modified, self._ttl, self._clock()):
            return file_url(target)
        data = self._fetch(url)
        self._write_atomic(target, data)
        return file_url(target)

    def _write_atomic(self, target: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-", suffix=target.suffix)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, target)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise CacheWriteError(str(exc)) from exc

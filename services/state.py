"""Lock-guarded launch table and desktop-id set shared by loading and launching."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Mapping

from services.errors import StateLockError
from services.models import LaunchParams


class SharedLaunchState:
    """Launch descriptors and desktop ids from the most recent successful load.

    Both maps are replaced together by ``replace``; readers take one lock at
    a time and only for the duration of a single lookup.
    """

    def __init__(self, *, lock_timeout: float = 5.0) -> None:
        self._lock_timeout = lock_timeout
        self._launches_lock = threading.Lock()
        self._desktop_lock = threading.Lock()
        self._launches: dict[str, LaunchParams] = {}
        self._desktop_ids: frozenset[str] = frozenset()

    def replace(self, launches: Mapping[str, LaunchParams], desktop_ids: set[str] | frozenset[str]) -> None:
        new_launches = dict(launches)
        new_desktop = frozenset(desktop_ids)
        with self._acquire(self._launches_lock), self._acquire(self._desktop_lock):
            self._launches = new_launches
            self._desktop_ids = new_desktop

    def is_desktop(self, product_id: str) -> bool:
        with self._acquire(self._desktop_lock):
            return product_id in self._desktop_ids

    def get_launch(self, product_id: str) -> LaunchParams | None:
        with self._acquire(self._launches_lock):
            return self._launches.get(product_id)

    def snapshot(self) -> tuple[dict[str, LaunchParams], frozenset[str]]:
        with self._acquire(self._launches_lock), self._acquire(self._desktop_lock):
            return dict(self._launches), self._desktop_ids

    @contextmanager
    def _acquire(self, lock: threading.Lock) -> Iterator[None]:
        if not lock.acquire(timeout=self._lock_timeout):
            raise StateLockError()
        try:
            yield
        finally:
            lock.release()

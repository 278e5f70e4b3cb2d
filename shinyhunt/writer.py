"""Debounced, coalescing hunt writes.

Rapid edits to one hunt (encounter taps, typing notes) are merged into a
pending batch per ``(user_id, pokemon_id)``.  Each edit restarts that key's
quiet-period timer; when it fires the whole batch goes out as one merge
write.  A per-key lock keeps at most one write in flight for a hunt, and the
batch is taken under that lock so a later batch can never be overwritten by
an earlier one.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, Dict, Mapping, Tuple

from .backend.base import HuntStore

logger = logging.getLogger(__name__)

Key = Tuple[str, int]


class DebouncedWriter:
    def __init__(self, store: HuntStore, delay: float = 1.0) -> None:
        self.store = store
        self.delay = delay
        self._pending: Dict[Key, Dict[str, Any]] = {}
        self._timers: Dict[Key, threading.Timer] = {}
        self._key_locks: Dict[Key, threading.Lock] = {}
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, user_id: str, pokemon_id: int, fields: Mapping[str, Any]) -> None:
        """Queue *fields* for the hunt, restarting its quiet period."""
        if not user_id:
            return
        key = (user_id, pokemon_id)
        with self._lock:
            if self._closed:
                raise RuntimeError("writer is closed")
            self._pending.setdefault(key, {}).update(fields)
            self._key_locks.setdefault(key, threading.Lock())
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(self.delay, self._fire, args=(key,))
            timer.daemon = True
            self._timers[key] = timer
            timer.start()

    def pending(self) -> Dict[Key, Dict[str, Any]]:
        with self._lock:
            return {key: dict(fields) for key, fields in self._pending.items()}

    def _fire(self, key: Key) -> None:
        with self._lock:
            key_lock = self._key_locks[key]
        with key_lock:
            with self._lock:
                fields = self._pending.pop(key, None)
                timer = self._timers.get(key)
                if timer is not None and timer is threading.current_thread():
                    del self._timers[key]
            if not fields:
                return
            user_id, pokemon_id = key
            try:
                self.store.write_hunt(user_id, pokemon_id, fields)
            except (sqlite3.Error, OSError, ValueError) as exc:
                logger.error("Failed to save hunt %s for %s: %s", pokemon_id, user_id, exc)

    def flush(self) -> None:
        """Write every pending batch now, on the calling thread."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            keys = list(self._pending)
        for timer in timers:
            timer.cancel()
        for key in keys:
            self._fire(key)

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self.flush()

import threading
import time

import pytest

from shinyhunt.backend import MemoryHuntStore
from shinyhunt.writer import DebouncedWriter


class RecordingStore(MemoryHuntStore):
    def __init__(self, write_delay=0.0):
        super().__init__()
        self.writes = []
        self.write_delay = write_delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._count_lock = threading.Lock()

    def write_hunt(self, user_id, pokemon_id, fields, ver=None):
        with self._count_lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.write_delay)
            self.writes.append((user_id, pokemon_id, dict(fields)))
            return super().write_hunt(user_id, pokemon_id, fields, ver=ver)
        finally:
            with self._count_lock:
                self.in_flight -= 1


def test_rapid_edits_coalesce_into_one_write():
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=60)
    for n in range(1, 6):
        writer.submit("ash", 25, {"encounters": n})
    writer.submit("ash", 25, {"notes": "tall grass"})
    assert store.writes == []

    writer.flush()

    assert store.writes == [("ash", 25, {"encounters": 5, "notes": "tall grass"})]
    assert writer.pending() == {}


def test_keys_are_written_separately():
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=60)
    writer.submit("ash", 25, {"encounters": 1})
    writer.submit("ash", 4, {"encounters": 2})
    writer.submit("misty", 25, {"encounters": 3})
    writer.flush()
    assert sorted(w[:2] for w in store.writes) == [("ash", 4), ("ash", 25), ("misty", 25)]


def test_timer_writes_after_quiet_period():
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=0.05)
    writer.submit("ash", 25, {"encounters": 1})
    writer.submit("ash", 25, {"encounters": 2})
    deadline = time.time() + 5
    while not store.writes and time.time() < deadline:
        time.sleep(0.01)
    time.sleep(0.1)
    assert store.writes == [("ash", 25, {"encounters": 2})]
    assert store.read_hunts("ash")[25].encounters == 2


def test_edits_during_a_write_go_out_next():
    store = RecordingStore(write_delay=0.2)
    writer = DebouncedWriter(store, delay=0.01)
    writer.submit("ash", 25, {"encounters": 1})
    deadline = time.time() + 5
    while store.in_flight == 0 and time.time() < deadline:
        time.sleep(0.005)
    writer.submit("ash", 25, {"encounters": 2})
    writer.submit("ash", 25, {"encounters": 3})
    time.sleep(0.05)
    writer.flush()

    assert store.max_in_flight == 1
    assert [w[2]["encounters"] for w in store.writes] == [1, 3]
    assert store.read_hunts("ash")[25].encounters == 3


def test_no_user_is_ignored():
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=60)
    writer.submit("", 25, {"encounters": 1})
    writer.flush()
    assert store.writes == []


def test_close_flushes_and_rejects_new_edits():
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=60)
    writer.submit("ash", 25, {"location": "Route 1"})
    writer.close()
    assert store.read_hunts("ash")[25].location == "Route 1"
    with pytest.raises(RuntimeError):
        writer.submit("ash", 25, {"location": "Route 2"})


def test_failed_write_is_logged(caplog):
    store = RecordingStore()
    writer = DebouncedWriter(store, delay=60)
    writer.submit("ash", 25, {"encounters": -1})
    with caplog.at_level("ERROR"):
        writer.flush()
    assert "Failed to save hunt 25 for ash" in caplog.text

"""Tests for the reader-writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from textbayes.locking import ReadWriteLock


class TestReadWriteLock:
    def test_multiple_readers_share(self) -> None:
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read_locked():
                # All three readers must be inside at once to pass the barrier.
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)
        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        lock.acquire_write()

        def reader() -> None:
            with lock.read_locked():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)

        assert events == ["write-done", "read"]

    def test_writer_waits_for_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write_locked():
                events.append("write")

        t = threading.Thread(target=writer)
        t.start()
        time.sleep(0.05)
        events.append("read-done")
        lock.release_read()
        t.join(timeout=5)

        assert events == ["read-done", "write"]

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write_locked():
                events.append("write")

        def late_reader() -> None:
            with lock.read_locked():
                events.append("late-read")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)

        assert events == ["write", "late-read"]

    def test_lock_released_on_exception(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            with lock.write_locked():
                raise RuntimeError("boom")
        # Would deadlock if the write lock leaked.
        with lock.read_locked():
            pass

    def test_unbalanced_release_raises(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()

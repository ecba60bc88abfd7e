import threading
import time

import pytest

from tiercache.infrastructure.concurrency.rw_lock import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=5)

    def reader():
        with lock.read_locked():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert not inside.broken


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []
    lock.acquire_write()

    def reader():
        with lock.read_locked():
            events.append("read")

    thread = threading.Thread(target=reader)
    thread.start()
    time.sleep(0.05)
    events.append("write done")
    lock.release_write()
    thread.join(timeout=5)

    assert events == ["write done", "read"]


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_locked():
            events.append("write")

    def late_reader():
        with lock.read_locked():
            events.append("late read")

    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    time.sleep(0.05)
    reader_thread = threading.Thread(target=late_reader)
    reader_thread.start()
    time.sleep(0.05)

    assert events == []
    lock.release_read()
    writer_thread.join(timeout=5)
    reader_thread.join(timeout=5)

    assert events == ["write", "late read"]


def test_unmatched_release_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_lock_is_released_when_the_block_raises():
    lock = ReadWriteLock()
    with pytest.raises(ValueError):
        with lock.write_locked():
            raise ValueError("inside")

    with lock.read_locked():
        pass

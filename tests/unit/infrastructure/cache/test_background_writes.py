import threading

import pytest

from tiercache.domain.models.errors import DataConversionError
from tiercache.domain.models.expiration import Expiration
from tiercache.infrastructure.cache.codecs import JsonCodec, TextCodec


@pytest.fixture
def gated_fs(mocker, file_system):
    """Holds every disk write until the test opens the gate."""
    gate = threading.Event()
    original_write = file_system.write_bytes

    def slow_write(path, data):
        gate.wait(timeout=5)
        original_write(path, data)

    mocker.patch.object(file_system, "write_bytes", side_effect=slow_write)
    return gate


@pytest.fixture
def background(make_cache):
    return make_cache("background", TextCodec(), background_writes=True)


def test_write_reaches_disk_after_flush(background):
    background.set("k", "v")
    background.flush()

    assert (background.directory / "k.cache").exists()
    background.evict_from_memory("k")
    assert background.get("k") == "v"


def test_pending_write_is_readable_before_it_lands(background, gated_fs):
    background.set("k", "v")
    background.evict_from_memory("k")

    assert background.get("k") == "v"
    assert not (background.directory / "k.cache").exists()

    gated_fs.set()
    background.flush()
    assert (background.directory / "k.cache").exists()
    assert background.all_keys() == ["k"]


def test_pending_removal_hides_the_entry(background, gated_fs):
    gated_fs.set()
    background.set("k", "v")
    background.flush()
    gated_fs.clear()

    background.set("other", "x")
    background.remove("k")

    assert background.get("k") is None

    gated_fs.set()
    background.flush()
    assert not (background.directory / "k.cache").exists()
    assert background.all_keys() == ["other"]


def test_writes_land_in_submission_order(background):
    for i in range(20):
        background.set("k", f"v{i}")
    background.flush()

    background.evict_from_memory("k")
    assert background.get("k") == "v19"


def test_set_after_remove_wins(background):
    background.set("k", "first")
    background.remove("k")
    background.set("k", "second")
    background.flush()

    background.evict_from_memory("k")
    assert background.get("k") == "second"


def test_remove_expired_waits_for_queued_writes(background, clock):
    background.set("short", "a", Expiration.seconds(1))
    background.set("long", "b", Expiration.hours(1))
    clock.advance(5)

    assert background.remove_expired() == 1
    assert background.all_keys() == ["long"]


def test_remove_all_waits_for_queued_writes(background):
    for i in range(5):
        background.set(f"k{i}", "v")

    background.remove_all()

    assert background.all_keys() == []
    assert list(background.directory.iterdir()) == []


def test_encode_failure_raises_on_the_caller(make_cache):
    cache = make_cache("docs", JsonCodec(), background_writes=True)

    with pytest.raises(DataConversionError):
        cache.set("doc", {"set": {1, 2}})

    cache.flush()
    assert cache.all_keys() == []


def test_close_drains_queue_and_falls_back_to_synchronous(background):
    background.set("k", "v")
    background.close()

    assert (background.directory / "k.cache").exists()

    background.set("after", "close")
    assert (background.directory / "after.cache").exists()
    background.close()


def test_context_manager_closes(make_cache):
    with make_cache("ctx", TextCodec(), background_writes=True) as cache:
        cache.set("k", "v")
    assert (cache.directory / "k.cache").exists()


def test_flush_is_a_no_op_in_synchronous_mode(make_cache):
    cache = make_cache("sync", TextCodec())
    cache.set("k", "v")
    cache.flush()
    assert (cache.directory / "k.cache").exists()


def test_failed_write_does_not_leave_a_stale_value_behind(background, mocker, file_system):
    mocker.patch.object(file_system, "write_bytes", side_effect=RuntimeError("broken file system"))

    background.set("k", "stale")
    background.flush()
    background.evict_from_memory("k")

    assert background.get("k") is None


def test_remove_after_failed_write_and_close(background, mocker, file_system):
    mocker.patch.object(file_system, "write_bytes", side_effect=RuntimeError("broken file system"))

    background.set("k", "stale")
    background.flush()
    background.close()
    background.remove("k")

    assert background.get("k") is None
    assert background.all_keys() == []


def test_failed_removal_leaves_disk_as_the_source(background, mocker, file_system):
    background.set("k", "v")
    background.flush()
    mocker.patch.object(file_system, "remove_file", side_effect=RuntimeError("broken file system"))

    background.remove("k")
    background.flush()

    assert (background.directory / "k.cache").exists()
    assert background.get("k") == "v"


def test_stopped_worker_falls_back_to_synchronous(background):
    # Worker stopped but not yet detached, as when close() runs concurrently
    background._executor.shutdown(wait=True)

    background.set("k", "v")
    assert (background.directory / "k.cache").exists()

    background.flush()
    background.remove("k")
    assert not (background.directory / "k.cache").exists()
    assert background.get("k") is None

    background.set("other", "x")
    assert background.remove_expired() == 0
    assert background.all_keys() == ["other"]

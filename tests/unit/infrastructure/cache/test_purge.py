from pathlib import Path

from tiercache.domain.events.cache_events import PurgeFailed
from tiercache.infrastructure.cache import purge
from tiercache.infrastructure.cache.codecs import TextCodec
from tiercache.infrastructure.cache.purge import NAMESPACE, platform_cache_dir, purge_cache
from tiercache.infrastructure.cache.tiered_cache import TieredCache


def test_configured_root(cache_root: Path):
    assert purge.cache_root() == cache_root


def test_platform_default_root(mocker):
    mocker.patch("tiercache.infrastructure.cache.purge.get_cache_root", return_value=None)
    assert purge.cache_root() == platform_cache_dir() / NAMESPACE


def test_platform_cache_dir_linux(mocker, tmp_path: Path):
    mocker.patch("tiercache.infrastructure.cache.purge.platform.system", return_value="Linux")
    mocker.patch.dict("os.environ", {"XDG_CACHE_HOME": str(tmp_path)})
    assert platform_cache_dir() == tmp_path


def test_platform_cache_dir_macos(mocker):
    mocker.patch("tiercache.infrastructure.cache.purge.platform.system", return_value="Darwin")
    assert platform_cache_dir() == Path.home() / "Library" / "Caches"


def test_purge_removes_every_default_located_cache(cache_root: Path):
    first = TieredCache("first", TextCodec())
    second = TieredCache("second", TextCodec())
    first.set("k", "v")
    second.set("k", "v")

    assert purge_cache() is True
    assert not cache_root.exists()


def test_purge_of_missing_root_succeeds(tmp_path: Path):
    assert purge_cache(tmp_path / "never-created") is True


def test_purge_failure_is_reported(tmp_path: Path, mocker):
    fs = mocker.Mock()
    fs.remove_tree.side_effect = PermissionError("denied")
    events = []

    assert purge_cache(tmp_path, file_system=fs, diagnostics=events.append) is False
    assert len(events) == 1 and isinstance(events[0], PurgeFailed)
    assert events[0].root == str(tmp_path)


def test_live_instance_memory_survives_purge(cache_root: Path):
    cache = TieredCache("live", TextCodec())
    cache.set("k", "v")

    purge_cache()

    assert cache.get("k") == "v"
    cache.evict_from_memory("k")
    assert cache.get("k") is None

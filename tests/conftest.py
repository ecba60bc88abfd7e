import json
from pathlib import Path
from typing import Optional

import pytest
from typer.testing import CliRunner

from tiercache.domain.interfaces.convertible import DataConvertible, Serializable
from tiercache.infrastructure.cache.codecs import JsonCodec
from tiercache.infrastructure.cache.tiered_cache import TieredCache
from tiercache.infrastructure.config.settings import clear_test_config, set_config_for_testing
from tiercache.infrastructure.filesystem.local_fs import LocalFileSystem


class IceCreamFlavor(DataConvertible):
    """Sample value type that owns its byte representation."""

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def from_bytes(cls, data: bytes) -> Optional["IceCreamFlavor"]:
        json_dict = cls.json_dictionary(data)
        if json_dict is None or not isinstance(json_dict.get("name"), str):
            return None
        return cls(json_dict["name"])

    def to_bytes(self) -> bytes:
        return json.dumps({"name": self.name}, indent=4).encode("utf-8")

    def __eq__(self, other):
        return isinstance(other, IceCreamFlavor) and other.name == self.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"IceCreamFlavor({self.name!r})"


class Topping(Serializable):
    """Sample value type that describes itself as a dictionary."""

    def __init__(self, name: str, grams: int):
        self.name = name
        self.grams = grams

    @classmethod
    def from_serialized(cls, serialized):
        try:
            return cls(str(serialized["name"]), int(serialized["grams"]))
        except (KeyError, TypeError, ValueError):
            return None

    def serialize(self):
        return {"name": self.name, "grams": self.grams}

    def __eq__(self, other):
        return isinstance(other, Topping) and (other.name, other.grams) == (self.name, self.grams)


class FakeClock:
    """Adjustable clock returning POSIX seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def cache_root(tmp_path: Path):
    """Points the default cache root at a temporary directory for every test."""
    root = tmp_path / "cache-root"
    set_config_for_testing({"TIERCACHE_ROOT": str(root)})
    yield root
    clear_test_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def file_system():
    return LocalFileSystem()


@pytest.fixture
def make_cache(tmp_path: Path, clock: FakeClock, file_system: LocalFileSystem):
    """Factory for caches in a temporary directory; closes them at teardown."""
    created = []

    def _make(name: str = "flavors", codec=JsonCodec(), **kwargs):
        kwargs.setdefault("directory", tmp_path / "caches" / name)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("file_system", file_system)
        cache = TieredCache(name, codec, **kwargs)
        created.append(cache)
        return cache

    yield _make
    for cache in created:
        cache.close()

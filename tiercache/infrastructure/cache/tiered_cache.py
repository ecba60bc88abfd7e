"""Concrete implementation of the two-tier cache.

Manages a memory tier (any ``MemoryStore``, LRU by default) in front of a
disk tier holding one JSON envelope per key. Every entry carries an absolute
expiration time fixed when it was written.

Persistence timing
------------------
By default a write updates memory and disk inside one write-exclusive
section, so both tiers agree as soon as ``set`` returns.

With ``background_writes=True`` the memory tier is updated on the caller's
thread and the disk work is queued to a single worker thread. Queued tasks
run one at a time, in submission order, each inside the write-exclusive
section. Until its task has run, a write is visible to readers through a
pending map (and a removal through a tombstone in the same map), so reads
never observe the disk lagging behind. ``remove_expired`` and ``remove_all``
are barriers in both modes: they wait until they have completed.

Concurrency
-----------
Disk reads share a ``ReadWriteLock``; disk mutations take it exclusively.
A ``get`` answered by memory or by the pending map never waits on it. A
mutation counter stops a reader from warming memory with a disk record that
a write racing with it has already superseded.
"""

import contextlib
import copy
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar, Union

# Domain Layer Imports
from tiercache.domain.events.cache_events import (
    DiagnosticsHook,
    DiskReadFailed,
    DiskRemoveFailed,
    DiskWriteFailed,
    DomainEvent,
    EntryDecodeFailed,
    ProtectionFailed,
    publish,
)
from tiercache.domain.interfaces.cache import CacheService
from tiercache.domain.interfaces.codec import Codec
from tiercache.domain.interfaces.filesystem import FileSystem
from tiercache.domain.interfaces.memory_store import MemoryStore
from tiercache.domain.models.common import CacheKey, CacheName, SanitizedKey
from tiercache.domain.models.envelope import Envelope
from tiercache.domain.models.errors import CacheDirectoryError, DataConversionError
from tiercache.domain.models.expiration import Expiration

# Infrastructure Layer Imports
from tiercache.infrastructure.cache.codecs import codec_for
from tiercache.infrastructure.cache.locator import KeyLocator, Location, sanitize
from tiercache.infrastructure.cache.purge import cache_root
from tiercache.infrastructure.concurrency.rw_lock import ReadWriteLock
from tiercache.infrastructure.filesystem.local_fs import LocalFileSystem
from tiercache.infrastructure.memory.lru_store import DEFAULT_MAX_ITEMS, LRUMemoryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Tombstone:
    """Marks a key whose removal is queued but has not reached the disk yet."""
    __slots__ = ()


class TieredCache(CacheService[T]):
    """Memory + disk cache with per-entry expiration."""

    def __init__(
        self,
        name: str,
        codec: Union[Codec[T], type],
        directory: Optional[Path] = None,
        protection: Optional[int] = None,
        *,
        memory_store: Optional[MemoryStore] = None,
        file_system: Optional[FileSystem] = None,
        clock: Callable[[], float] = time.time,
        background_writes: bool = False,
        diagnostics: Optional[DiagnosticsHook] = None,
        max_memory_items: Optional[int] = DEFAULT_MAX_ITEMS,
    ):
        """Initializes the cache and provisions its directory.

        Args:
            name: Instance name. Labels the memory tier and, without an
                explicit ``directory``, names the directory under the cache root.
            codec: A ``Codec``, or a value class ``codec_for`` understands.
            directory: Overrides the default ``cache_root() / name`` location.
            protection: POSIX mode bits applied to the directory, best-effort.
            memory_store: Memory tier. Defaults to an ``LRUMemoryStore``.
            file_system: Disk adapter. Defaults to ``LocalFileSystem``.
            clock: Returns the current POSIX time.
            background_writes: Queue disk work to a dedicated worker thread.
            diagnostics: Receives an event for every absorbed failure.
            max_memory_items: Capacity of the default memory store.

        Raises:
            CacheDirectoryError: If the directory cannot be created.
            TypeError: If no codec can be derived from ``codec``.
        """
        self.name = CacheName(name)
        self.codec: Codec[T] = codec_for(codec)
        self.directory = Path(directory) if directory is not None else cache_root() / name
        self._file_system = file_system or LocalFileSystem()
        self._clock = clock
        self._diagnostics = diagnostics
        # Per-thread outbox for events raised while the lock is held
        self._events = threading.local()

        self._setup_directory(protection)

        self._memory = memory_store if memory_store is not None else LRUMemoryStore(max_items=max_memory_items, label=name)
        self._locator = KeyLocator(self.directory)
        self._lock = ReadWriteLock()

        # Guards _pending and _mutations
        self._state_lock = threading.Lock()
        self._pending: Dict[SanitizedKey, Union[Envelope, _Tombstone]] = {}
        self._mutations = 0

        self._known_keys: Optional[List[SanitizedKey]] = None
        self._known_keys_lock = threading.Lock()

        self._executor: Optional[ThreadPoolExecutor] = None
        if background_writes:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"tiercache-{sanitize(name)}")

        logger.info(
            f"Cache '{name}' initialized at {self.directory} "
            f"(persistence={'background' if background_writes else 'synchronous'})"
        )

    def _setup_directory(self, protection: Optional[int]) -> None:
        """Creates the cache directory and applies the protection mode."""
        try:
            self._file_system.make_directory(self.directory)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to create cache directory {self.directory}: {e}")
            raise CacheDirectoryError(self.directory, str(e)) from e

        if protection is None:
            return
        try:
            self._file_system.set_permissions(self.directory, protection)
        except OSError as e:
            logger.warning(f"Cache '{self.name}': could not apply mode {oct(protection)} to {self.directory}: {e}")
            self._report(ProtectionFailed(
                cache_name=self.name, directory=str(self.directory), mode=protection, error_message=str(e)
            ))

    # --- Locking and diagnostics ---

    @contextlib.contextmanager
    def _shared(self) -> Iterator[None]:
        with self._collecting_events():
            with self._lock.read_locked():
                yield

    @contextlib.contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._collecting_events():
            with self._lock.write_locked():
                yield

    @contextlib.contextmanager
    def _collecting_events(self) -> Iterator[None]:
        """Holds back events reported inside the block until the lock is released.

        A diagnostics hook may then call back into the cache without
        deadlocking on the non-reentrant lock.
        """
        outbox: List[DomainEvent] = []
        previous = getattr(self._events, "outbox", None)
        self._events.outbox = outbox
        try:
            yield
        finally:
            self._events.outbox = previous
            if previous is not None:
                previous.extend(outbox)
            else:
                for event in outbox:
                    publish(self._diagnostics, event)

    def _report(self, event: DomainEvent) -> None:
        outbox = getattr(self._events, "outbox", None)
        if outbox is None:
            publish(self._diagnostics, event)
        else:
            outbox.append(event)

    # --- Reading ---

    def get(self, key: CacheKey, allow_expired: bool = False) -> Optional[T]:
        envelope = self._read(self._locator.locate(key), shared=True)
        if envelope is None:
            logger.debug(f"Cache '{self.name}' miss for key: {key}")
            return None
        if not allow_expired and envelope.is_expired(self._clock()):
            logger.debug(f"Cache '{self.name}' entry expired for key: {key}")
            return None
        return copy.deepcopy(envelope.value)

    def get_all(self, allow_expired: bool = False) -> List[T]:
        with self._shared():
            envelopes = [self._read(self._locator.locate_sanitized(key)) for key in self._live_keys()]

        now = self._clock()
        return [
            copy.deepcopy(envelope.value)
            for envelope in envelopes
            if envelope is not None and (allow_expired or not envelope.is_expired(now))
        ]

    def all_keys(self) -> List[SanitizedKey]:
        with self._shared():
            return self._live_keys()

    def _read(self, location: Location, shared: bool = False) -> Optional[Envelope]:
        """Finds the envelope for a location: memory, then pending work, then disk.

        With ``shared`` the disk lookup takes the read lock; callers already
        holding the lock pass False.
        """
        envelope = self._memory.get(location.memory_key)
        if envelope is not None:
            logger.debug(f"Cache '{self.name}' memory hit: {location.memory_key}")
            return envelope

        with self._state_lock:
            pending = self._pending.get(location.memory_key)
            generation = self._mutations
        if isinstance(pending, _Tombstone):
            return None
        if pending is not None:
            return pending

        with self._shared() if shared else contextlib.nullcontext():
            envelope = self._read_from_disk(location)
        if envelope is None:
            return None

        logger.debug(f"Cache '{self.name}' disk hit: {location.memory_key}")
        with self._state_lock:
            if self._mutations == generation:
                self._memory.set(location.memory_key, envelope)
        return envelope

    def _read_from_disk(self, location: Location) -> Optional[Envelope]:
        path = location.path
        if not self._file_system.file_exists(path):
            return None
        try:
            data = self._file_system.read_bytes(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Cache '{self.name}': failed to read {path}: {e}")
            self._report(DiskReadFailed(
                cache_name=self.name, key=location.memory_key, path=str(path), error_message=str(e)
            ))
            return None

        envelope = Envelope.from_bytes(data, self.codec)
        if envelope is None:
            logger.warning(f"Cache '{self.name}': undecodable record {path}, treating as a miss")
            self._report(EntryDecodeFailed(
                cache_name=self.name, key=location.memory_key, path=str(path)
            ))
        return envelope

    # --- Known keys ---

    def _live_keys(self) -> List[SanitizedKey]:
        """Keys on disk, adjusted for queued writes and removals."""
        keys = set(self._disk_keys())
        with self._state_lock:
            for key, pending in self._pending.items():
                if isinstance(pending, _Tombstone):
                    keys.discard(key)
                else:
                    keys.add(key)
        return sorted(keys)

    def _disk_keys(self) -> List[SanitizedKey]:
        with self._known_keys_lock:
            if self._known_keys is None:
                try:
                    names = self._file_system.list_directory(self.directory)
                except OSError as e:
                    logger.warning(f"Cache '{self.name}': failed to list {self.directory}: {e}")
                    return []
                keys = (self._locator.key_from_filename(name) for name in names)
                self._known_keys = [key for key in keys if key is not None]
            return list(self._known_keys)

    def _invalidate_known_keys(self) -> None:
        with self._known_keys_lock:
            self._known_keys = None

    # --- Writing ---

    def set(self, key: CacheKey, value: T, expiration: Optional[Expiration] = None) -> None:
        if expiration is None:
            expiration = Expiration.never()
        envelope = Envelope(value=copy.deepcopy(value), expires_at=expiration.resolve(self._clock()))
        location = self._locator.locate(key)

        executor = self._executor
        if executor is None:
            with self._exclusive():
                with self._state_lock:
                    self._memory.set(location.memory_key, envelope)
                    self._mutations += 1
                self._invalidate_known_keys()
                payload = self._encode(location, envelope)
                self._write_to_disk(location, payload)
            return

        try:
            payload = self._encode(location, envelope)
        except DataConversionError:
            with self._state_lock:
                self._memory.set(location.memory_key, envelope)
                self._mutations += 1
            raise

        # Queue order must match the order writers updated memory
        with self._state_lock:
            self._memory.set(location.memory_key, envelope)
            self._pending[location.memory_key] = envelope
            self._mutations += 1
            queued = self._try_submit(executor, lambda: self._persist(location, envelope, payload))
            if queued is None:
                del self._pending[location.memory_key]
        self._invalidate_known_keys()

        if queued is None:
            with self._exclusive():
                self._write_to_disk(location, payload)
                self._invalidate_known_keys()

    def _encode(self, location: Location, envelope: Envelope) -> bytes:
        try:
            return envelope.to_bytes(self.codec)
        except DataConversionError as e:
            logger.error(f"Cache '{self.name}': cannot encode value for {location.memory_key}: {e}")
            raise

    def _persist(self, location: Location, envelope: Envelope, payload: bytes) -> None:
        try:
            self._write_to_disk(location, payload)
        finally:
            self._invalidate_known_keys()
            self._settle(location.memory_key, envelope)

    def _write_to_disk(self, location: Location, payload: bytes) -> None:
        try:
            self._file_system.write_bytes(location.path, payload)
            logger.debug(f"Cache '{self.name}' stored {location.memory_key} at {location.path}")
        except OSError as e:
            logger.error(f"Cache '{self.name}': failed to write {location.path}: {e}")
            self._report(DiskWriteFailed(
                cache_name=self.name, key=location.memory_key, path=str(location.path), error_message=str(e)
            ))

    def _settle(self, key: SanitizedKey, marker: Union[Envelope, _Tombstone]) -> None:
        """Drops ``marker`` from the pending map unless newer work replaced it."""
        with self._state_lock:
            if self._pending.get(key) is marker:
                del self._pending[key]

    # --- Removing ---

    def remove(self, key: CacheKey) -> None:
        location = self._locator.locate(key)

        executor = self._executor
        if executor is None:
            with self._exclusive():
                self._remove_now(location)
            return

        tombstone = _Tombstone()
        with self._state_lock:
            self._memory.evict(location.memory_key)
            self._pending[location.memory_key] = tombstone
            self._mutations += 1
            queued = self._try_submit(executor, lambda: self._unpersist(location, tombstone))
        self._invalidate_known_keys()

        if queued is None:
            with self._exclusive():
                self._remove_now(location)

    def remove_expired(self) -> int:
        removed = self._barrier(self._remove_expired_now)
        logger.info(f"Cache '{self.name}': removed {removed} expired entries")
        return removed

    def remove_all(self) -> None:
        self._barrier(self._remove_all_now)
        logger.info(f"Cache '{self.name}': removed all entries")

    def evict_from_memory(self, key: CacheKey) -> None:
        """Drops the memory copy of ``key`` only, as memory pressure would."""
        self._memory.evict(sanitize(key))

    def _remove_now(self, location: Location) -> None:
        with self._state_lock:
            self._memory.evict(location.memory_key)
            self._pending.pop(location.memory_key, None)
            self._mutations += 1
        self._invalidate_known_keys()
        self._remove_from_disk(location)

    def _unpersist(self, location: Location, tombstone: _Tombstone) -> None:
        try:
            self._remove_from_disk(location)
        finally:
            self._invalidate_known_keys()
            self._settle(location.memory_key, tombstone)

    def _remove_from_disk(self, location: Location) -> None:
        try:
            self._file_system.remove_file(location.path)
            logger.debug(f"Cache '{self.name}' removed {location.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Cache '{self.name}': failed to remove {location.path}: {e}")
            self._report(DiskRemoveFailed(
                cache_name=self.name, key=location.memory_key, path=str(location.path), error_message=str(e)
            ))

    def _remove_expired_now(self) -> int:
        now = self._clock()
        removed = 0
        for key in self._disk_keys():
            location = self._locator.locate_sanitized(key)
            envelope = self._read(location)
            if envelope is not None and envelope.is_expired(now):
                self._remove_now(location)
                removed += 1
        return removed

    def _remove_all_now(self) -> None:
        keys = self._disk_keys()
        with self._state_lock:
            self._memory.clear()
            if self._executor is None:
                # Nothing is queued, so anything left is stale
                self._pending.clear()
            self._mutations += 1
        for key in keys:
            self._remove_from_disk(self._locator.locate_sanitized(key))
        self._invalidate_known_keys()

    # --- Scheduling ---

    def _submit(self, executor: ThreadPoolExecutor, operation: Callable[[], Any]) -> Future:
        """Queues ``operation`` to run on the worker inside the write-exclusive section."""
        def task():
            with self._exclusive():
                return operation()

        future = executor.submit(task)
        future.add_done_callback(self._log_task_failure)
        return future

    def _try_submit(self, executor: ThreadPoolExecutor, operation: Callable[[], Any]) -> Optional[Future]:
        """Like ``_submit`` but returns None when ``close`` already stopped the worker."""
        try:
            return self._submit(executor, operation)
        except RuntimeError:
            logger.debug(f"Cache '{self.name}': worker stopped, running synchronously")
            return None

    def _barrier(self, operation: Callable[[], Any]) -> Any:
        """Runs ``operation`` exclusively and waits for its result.

        In background mode it is queued behind every write submitted so far.
        """
        executor = self._executor
        queued = None if executor is None else self._try_submit(executor, operation)
        if queued is None:
            with self._exclusive():
                return operation()
        return queued.result()

    def _log_task_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Cache '{self.name}': background task failed: {error}", exc_info=error)

    def flush(self) -> None:
        """Waits until every queued disk write and removal has completed."""
        executor = self._executor
        if executor is None:
            return
        try:
            executor.submit(lambda: None).result()
        except RuntimeError:
            # close() drained the queue already
            return

    def close(self) -> None:
        """Completes queued disk work and stops the worker.

        The cache stays usable afterwards, with synchronous persistence.
        """
        executor = self._executor
        if executor is None:
            return
        executor.shutdown(wait=True)
        self._executor = None
        with self._state_lock:
            self._pending.clear()
        logger.debug(f"Cache '{self.name}' worker stopped")

    def __enter__(self) -> "TieredCache[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self.all_keys())

    def __repr__(self) -> str:
        return f"TieredCache(name={self.name!r}, directory={str(self.directory)!r})"

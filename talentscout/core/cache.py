"""Two-tier (memory + disk) cache with per-entry TTL.

Lookups check a bounded in-process map first, then one JSON file per key
under the cache directory. Disk hits are promoted into memory. Writes go to
both tiers; a failed disk write is logged and otherwise ignored.

The memory tier evicts the oldest *inserted* key once full. Reads do not
refresh an entry's position.
"""

import copy
import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from talentscout.core.errors import CacheCorruptionError
from talentscout.core.schemas import CacheStats

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class _Entry:
    __slots__ = ("payload", "stored_at", "ttl")

    def __init__(self, payload: Any, stored_at: float, ttl: float) -> None:
        self.payload = payload
        self.stored_at = stored_at
        self.ttl = ttl

    def is_valid(self, now: float) -> bool:
        return now - self.stored_at < self.ttl

    def to_json(self) -> str:
        return json.dumps(
            {"payload": self.payload, "stored_at": self.stored_at, "ttl": self.ttl},
            indent=2,
        )


class CacheStore:
    """Key/value cache shared by every remote-fetch path.

    Usage::

        cache = CacheStore("data/cache", default_ttl=3600)
        key = CacheStore.generate_key("profile", "octocat")
        if (data := cache.get(key)) is None:
            data = await fetch(...)
            cache.set(key, data)
    """

    def __init__(
        self,
        directory: str | Path,
        default_ttl: float = 3600.0,
        max_memory_entries: int = 200,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if default_ttl <= 0:
            msg = "default_ttl must be positive"
            raise ValueError(msg)
        if max_memory_entries < 1:
            msg = "max_memory_entries must be at least 1"
            raise ValueError(msg)
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._default_ttl = default_ttl
        self._max_memory = max_memory_entries
        self._clock = clock
        self._memory: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._reset_counters()

    @property
    def directory(self) -> Path:
        return self._dir

    @staticmethod
    def generate_key(namespace: str, *params: Any) -> str:
        """Deterministic key for ``namespace`` plus ordered parameters."""
        raw = f"{namespace}:{json.dumps(list(params), default=str)}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the cached payload, or ``default`` when absent/expired."""
        now = self._clock()

        with self._lock:
            entry = self._memory.get(key)
            if entry is not None:
                if entry.is_valid(now):
                    self._hits += 1
                    self._memory_hits += 1
                    return copy.deepcopy(entry.payload)
                del self._memory[key]

        try:
            entry = self._read_disk(key)
        except CacheCorruptionError as e:
            logger.warning("%s - discarding", e)
            self._delete_file(key)
            entry = None

        with self._lock:
            if entry is not None and entry.is_valid(now):
                self._put_memory(key, entry)
                self._hits += 1
                self._disk_hits += 1
                return copy.deepcopy(entry.payload)
            self._misses += 1

        if entry is not None:
            # Expired on disk.
            self._delete_file(key)
        return default

    def set(self, key: str, payload: Any, ttl: float | None = None) -> None:
        """Store ``payload`` in both tiers."""
        use_ttl = self._default_ttl if ttl is None else ttl
        if use_ttl <= 0:
            msg = "ttl must be positive"
            raise ValueError(msg)
        entry = _Entry(copy.deepcopy(payload), self._clock(), use_ttl)

        with self._lock:
            self._put_memory(key, entry)

        try:
            self._path(key).write_text(entry.to_json(), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write cache entry %s to disk: %s", key, e)
            return
        with self._lock:
            self._writes += 1

    def invalidate_expired(self) -> int:
        """Remove stale entries from both tiers. Returns the number removed."""
        now = self._clock()
        removed = 0

        with self._lock:
            stale = [k for k, e in self._memory.items() if not e.is_valid(now)]
            for k in stale:
                del self._memory[k]
        removed += len(stale)

        for path in self._dir.glob(f"*{_SUFFIX}"):
            key = path.stem
            try:
                entry = self._read_disk(key)
            except CacheCorruptionError as e:
                logger.debug("%s - removing", e)
                entry = None
            if entry is None or not entry.is_valid(now):
                self._delete_file(key)
                if key not in stale:
                    removed += 1

        logger.info("Cleaned up %d expired cache entries", removed)
        return removed

    def clear(self) -> None:
        """Drop every entry in both tiers and reset the counters."""
        with self._lock:
            self._memory.clear()
            self._reset_counters()
        for path in self._dir.glob(f"*{_SUFFIX}"):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
        logger.info("Cache cleared: %s", self._dir)

    def preload(self, keys: Iterable[str]) -> int:
        """Pull valid disk entries for ``keys`` into memory. Returns count loaded."""
        now = self._clock()
        loaded = 0
        for key in keys:
            try:
                entry = self._read_disk(key)
            except CacheCorruptionError as e:
                logger.debug("%s - skipping preload", e)
                continue
            if entry is not None and entry.is_valid(now):
                with self._lock:
                    self._put_memory(key, entry)
                loaded += 1
        return loaded

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                memory_hits=self._memory_hits,
                disk_hits=self._disk_hits,
                writes=self._writes,
                memory_size=len(self._memory),
                max_memory_size=self._max_memory,
            )

    def close(self) -> None:
        """Release the memory tier. Disk entries stay for the next run."""
        stats = self.stats()
        logger.debug(
            "Closing cache: hit rate %.2f%% (%d memory, %d disk, %d misses)",
            stats.hit_rate, stats.memory_hits, stats.disk_hits, stats.misses,
        )
        with self._lock:
            self._memory.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset_counters(self) -> None:
        self._hits = 0
        self._misses = 0
        self._memory_hits = 0
        self._disk_hits = 0
        self._writes = 0

    def _put_memory(self, key: str, entry: _Entry) -> None:
        """Insert into the memory tier. Caller holds the lock."""
        if key not in self._memory and len(self._memory) >= self._max_memory:
            oldest = next(iter(self._memory))
            del self._memory[oldest]
        self._memory[key] = entry

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}{_SUFFIX}"

    def _read_disk(self, key: str) -> _Entry | None:
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheCorruptionError(key, str(e)) from e

        try:
            raw = json.loads(text)
            return _Entry(raw["payload"], float(raw["stored_at"]), float(raw["ttl"]))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CacheCorruptionError(key, f"{type(e).__name__}: {e}") from e

    def _delete_file(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete cache file for %s: %s", key, e)

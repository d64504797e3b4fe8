"""
Request-generation bookkeeping for derived projections.

A read that starts while a newer read or a write is in flight must not
overwrite the newer state. Each logical query key owns a generation that
only increases while a value or a read for it is alive; a result may only
be committed while the generation it was started under is still the latest
one for its key.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationCounter:
    """Per-key generation counter."""

    def __init__(self) -> None:
        self._generations: Dict[Hashable, int] = {}

    def current(self, key: Hashable) -> int:
        return self._generations.get(key, 0)

    def advance(self, key: Hashable) -> int:
        """Start a new generation for key and return it."""
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation

    def is_latest(self, key: Hashable, generation: int) -> bool:
        return self._generations.get(key, 0) == generation

    def keys(self) -> List[Hashable]:
        return list(self._generations)

    def discard(self, key: Hashable) -> None:
        """Forget key; only safe once no token for it is outstanding."""
        self._generations.pop(key, None)

    def __len__(self) -> int:
        return len(self._generations)


@dataclass
class _Entry(Generic[T]):
    value: T
    generation: int
    stored_at: float


class ProjectionCache(Generic[T]):
    """
    Latest-wins cache of derived projections.

    Usage:
        token = cache.begin(key)
        try:
            value = await compute()
        except Exception:
            cache.abandon(key, token)
            raise
        cache.commit(key, token, value)   # dropped if a newer begin/invalidate happened

    invalidate() is called on every write touching the key, so a write always
    wins over a read that was already in flight.

    Bookkeeping stays bounded: expired entries are pruned on every commit and
    a key's generation is forgotten once it has neither an entry nor a read
    in flight.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._counter = GenerationCounter()
        self._entries: Dict[Hashable, _Entry[T]] = {}
        self._in_flight: Dict[Hashable, int] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    @property
    def tracked_keys(self) -> int:
        """Keys that still hold a generation."""
        return len(self._counter)

    def _expired(self, entry: _Entry[T], now: float) -> bool:
        return now - entry.stored_at > self.ttl_seconds

    def _forget_if_idle(self, key: Hashable) -> None:
        if key not in self._entries and not self._in_flight.get(key):
            self._in_flight.pop(key, None)
            self._counter.discard(key)

    def _finish(self, key: Hashable) -> None:
        remaining = self._in_flight.get(key, 0) - 1
        if remaining > 0:
            self._in_flight[key] = remaining
        else:
            self._in_flight.pop(key, None)

    def _prune(self) -> None:
        now = self._clock()
        for key in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[key]
            self._forget_if_idle(key)

    def get(self, key: Hashable) -> Optional[T]:
        """Return the committed value for key if it is still fresh."""
        if not self.enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._counter.is_latest(key, entry.generation):
            return None
        if self._expired(entry, self._clock()):
            del self._entries[key]
            self._forget_if_idle(key)
            return None
        return entry.value

    def begin(self, key: Hashable) -> int:
        self._in_flight[key] = self._in_flight.get(key, 0) + 1
        return self._counter.advance(key)

    def commit(self, key: Hashable, generation: int, value: T) -> bool:
        """Store value only if generation is still the latest for key."""
        self._finish(key)
        self._prune()
        if not self._counter.is_latest(key, generation):
            logger.debug(
                "Dropping stale projection for %s (generation %s, latest %s)",
                key, generation, self._counter.current(key),
            )
            self._forget_if_idle(key)
            return False
        if self.enabled:
            self._entries[key] = _Entry(value=value, generation=generation, stored_at=self._clock())
        else:
            self._forget_if_idle(key)
        return True

    def abandon(self, key: Hashable, generation: int) -> None:
        """Release a token whose computation failed."""
        self._finish(key)
        self._forget_if_idle(key)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)
        if self._in_flight.get(key):
            # Outstanding tokens must lose against the write
            self._counter.advance(key)
        else:
            self._counter.discard(key)

    def invalidate_matching(self, predicate: Callable[[Hashable], bool]) -> int:
        """Invalidate every tracked key for which predicate holds."""
        keys = [k for k in set(self._entries) | set(self._in_flight) if predicate(k)]
        for key in keys:
            self.invalidate(key)
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()
        for key in list(self._in_flight):
            self._counter.advance(key)
        for key in [k for k in self._counter.keys() if k not in self._in_flight]:
            self._counter.discard(key)

    def __len__(self) -> int:
        return len(self._entries)

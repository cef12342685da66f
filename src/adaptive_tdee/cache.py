"""Caller-owned memoization for TDEE estimates.

Estimates are pure functions of their inputs, so a cache keyed on the exact
inputs never goes stale and needs no expiry. The cache is an ordinary
object: create one where repeated estimates are expected (a long-running
process re-rendering the same user's data, for instance) and pass it
around. Nothing in the engine keeps one at module level.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Callable, Hashable, Optional, Sequence, TypeVar

from adaptive_tdee.config.settings import EstimatorConfig
from adaptive_tdee.tracking.models import Biometrics, IntakeSample, WeightSample

T = TypeVar("T")

DEFAULT_MAXSIZE = 128


@dataclass(frozen=True)
class EstimateKey:
    """Hashable fingerprint of one estimate_tdee call."""

    weights: tuple[tuple[date, float], ...]
    intakes: tuple[tuple[date, float], ...]
    biometrics: Biometrics
    today: Optional[date]
    config: EstimatorConfig

    @classmethod
    def from_inputs(
        cls,
        weights: Sequence[WeightSample],
        intakes: Sequence[IntakeSample],
        biometrics: Biometrics,
        today: Optional[date] = None,
        config: Optional[EstimatorConfig] = None,
    ) -> "EstimateKey":
        return cls(
            weights=tuple((w.date, float(w.weight_kg)) for w in weights),
            intakes=tuple((i.date, float(i.calories)) for i in intakes),
            biometrics=biometrics,
            today=today,
            config=config or EstimatorConfig(),
        )


@dataclass
class CacheStats:
    """Hit/miss counters for an EstimateCache."""

    hits: int = 0
    misses: int = 0
    size: int = 0
    maxsize: int = DEFAULT_MAXSIZE


class EstimateCache:
    """Least-recently-used cache of computed results.

    Args:
        maxsize: Maximum number of entries kept. The least recently used
            entry is evicted when a new one would exceed it.
    """

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE):
        if maxsize <= 0:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self.maxsize = maxsize
        self._entries: OrderedDict[Hashable, object] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get(self, key: Hashable) -> Optional[object]:
        """Return the cached value (marking it recently used) or None."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: Hashable, value: object) -> None:
        """Store a value, evicting the least recently used entry if full."""
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = value
        while len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        if key in self._entries:
            self._hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]  # type: ignore[return-value]

        self._misses += 1
        value = compute()
        self.put(key, value)
        return value

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._entries),
            maxsize=self.maxsize,
        )

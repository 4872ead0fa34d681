"""Run-scoped cache of aggregated player stats."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from domain.common import PlayerStats

ComputeFn = Callable[[str], PlayerStats]


@dataclass
class _ComputeSlot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


class StatsCache:
    """Unbounded identity -> PlayerStats map living for one evaluation run.

    ``get_or_compute`` runs ``compute`` at most once per identity, including
    when several threads ask for the same uncached identity at once. Lookups
    never wait on a compute that is still in flight for another identity.
    """

    def __init__(self, seed: Iterable[PlayerStats] = ()) -> None:
        self._records: dict[str, PlayerStats] = {}
        self._slots: dict[str, _ComputeSlot] = {}
        self._guard = threading.Lock()
        self._computations = 0
        for stats in seed:
            self.put(stats)

    def get(self, identity: str) -> PlayerStats | None:
        with self._guard:
            return self._records.get(identity)

    def put(self, stats: PlayerStats) -> None:
        """Insert a pre-built record; an identity can only be filled once."""
        with self._guard:
            if stats.membership_id in self._records:
                raise ValueError(f"identity={stats.membership_id} is already cached")
            self._records[stats.membership_id] = stats

    def get_or_compute(self, identity: str, compute: ComputeFn) -> PlayerStats:
        cached = self.get(identity)
        if cached is not None:
            return cached

        with self._guard:
            slot = self._slots.setdefault(identity, _ComputeSlot())
            slot.waiters += 1

        try:
            with slot.lock:
                cached = self.get(identity)
                if cached is not None:
                    return cached

                stats = compute(identity)
                with self._guard:
                    self._records[identity] = stats
                    self._computations += 1
                return stats
        finally:
            # The slot outlives a failed compute only while other callers still hold it.
            with self._guard:
                slot.waiters -= 1
                if slot.waiters == 0:
                    self._slots.pop(identity, None)

    @property
    def computations(self) -> int:
        """Number of records filled through ``get_or_compute``."""
        return self._computations

    @property
    def pending(self) -> int:
        """Identities that still have callers inside ``get_or_compute``."""
        with self._guard:
            return len(self._slots)

    def __contains__(self, identity: object) -> bool:
        with self._guard:
            return identity in self._records

    def __len__(self) -> int:
        with self._guard:
            return len(self._records)


__all__ = ["StatsCache"]

"""Per-hook ordering cache."""

from __future__ import annotations


class OrderingCache:
    """Remember which hooks have had their priority buckets sorted.

    A hook is marked after its buckets are re-keyed in ascending priority
    order and must be invalidated on every structural change to those
    buckets, otherwise dispatch would walk them in insertion order.
    """

    def __init__(self) -> None:
        self._sorted: set[str] = set()

    def is_sorted(self, hook_name: str) -> bool:
        return hook_name in self._sorted

    def mark_sorted(self, hook_name: str) -> None:
        self._sorted.add(hook_name)

    def invalidate(self, hook_name: str) -> None:
        self._sorted.discard(hook_name)

"""Merged cross-reference index keyed by trait or module path."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
import logging
from typing import Any, Generic, TypeVar

from docxref.core.diagnostics import DiagnosticEmitter, NullEmitter
from docxref.core.models import Contribution


logger = logging.getLogger(__name__)

E = TypeVar("E")


def merge_entries(
    current: tuple[E, ...] | None, incoming: tuple[E, ...], *, additive: bool = False
) -> tuple[E, ...]:
    """Combine an origin's recorded entries with a new contribution.

    Replacement returns ``incoming``. Additive merging appends the incoming
    entries not already recorded, keeping first-seen order.
    """
    if not additive or not current:
        return incoming
    seen = set(current)
    appended: list[E] = []
    for entry in incoming:
        if entry not in seen:
            seen.add(entry)
            appended.append(entry)
    return current + tuple(appended)


class Registry(Generic[E]):
    """Ordered index of per-origin contributions for each key.

    Origins keep the order in which they were first registered for a key.
    Re-registering an origin replaces its entries without moving it, or with
    ``additive=True`` extends them with the entries it has not seen yet.
    """

    def __init__(
        self, *, additive: bool = False, emitter: DiagnosticEmitter | None = None
    ) -> None:
        self.additive = additive
        self._emitter: DiagnosticEmitter = emitter or NullEmitter()
        self._index: dict[str, dict[str, tuple[E, ...]]] = {}

    def register(self, key: str, origin: str, entries: Sequence[E]) -> None:
        """Merge ``entries`` contributed by ``origin`` under ``key``."""
        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Sequence):
            reason = f"entries must be a list, got {type(entries).__name__}"
            self._emitter.warning(f"Ignoring contribution from '{origin}' for '{key}': {reason}.")
            self._emitter.event(
                "contribution_dropped", {"key": key, "origin": origin, "reason": reason}
            )
            return

        values = tuple(entries)
        if not values:
            logger.debug("Ignoring empty contribution from %s for %s", origin, key)
            return

        bucket = self._index.setdefault(key, {})
        current = bucket.get(origin)
        merged = merge_entries(current, values, additive=self.additive)
        if merged == current:
            return
        bucket[origin] = merged

    def query(self, key: str) -> tuple[Contribution, ...]:
        """Return a snapshot of the contributions for ``key`` (empty when unknown)."""
        bucket = self._index.get(key)
        if not bucket:
            return ()
        return tuple(Contribution(origin, entries) for origin, entries in bucket.items())

    def keys(self) -> frozenset[str]:
        """Return every key with at least one contribution."""
        return frozenset(self._index)

    def origins(self, key: str) -> tuple[str, ...]:
        """Return the origins contributing to ``key`` in first-seen order."""
        return tuple(self._index.get(key, ()))

    def entry_count(self, key: str) -> int:
        """Return the number of entries recorded for ``key`` across all origins."""
        return sum(len(entries) for entries in self._index.get(key, {}).values())

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._index))


def sort_by_origin(contributions: Iterable[Contribution]) -> tuple[Contribution, ...]:
    """Return ``contributions`` ordered by package name, as rendered in panels."""
    return tuple(sorted(contributions, key=lambda item: item.origin.lower()))


def filter_entries(
    contributions: Iterable[Contribution], predicate: Callable[[Any], bool]
) -> tuple[Contribution, ...]:
    """Keep entries matching ``predicate``, dropping origins left empty."""
    filtered: list[Contribution] = []
    for contribution in contributions:
        kept = tuple(entry for entry in contribution.entries if predicate(entry))
        if kept:
            filtered.append(Contribution(contribution.origin, kept))
    return tuple(filtered)


__all__ = ["Registry", "filter_entries", "merge_entries", "sort_by_origin"]

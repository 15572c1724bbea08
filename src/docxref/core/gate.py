"""Two-phase gate decoupling fragment arrival from consumer readiness."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
import logging
from typing import Any, Generic, TypeVar

from docxref.core.diagnostics import DiagnosticEmitter, NullEmitter
from docxref.core.exceptions import MalformedContributionError
from docxref.core.registry import Registry, merge_entries


logger = logging.getLogger(__name__)

E = TypeVar("E")

Normaliser = Callable[[Any], tuple[E, ...]]


class GateState(str, Enum):
    """Lifecycle of a fragment gate."""

    BUFFERING = "buffering"
    FORWARDING = "forwarding"


class FragmentGate(Generic[E]):
    """Buffer contributions until a registry is attached, then forward them.

    While buffering, contributions are keyed by ``(key, origin)`` and merged
    with the registry's policy (``additive`` must match it), so flushing the
    buffer yields the same index as registering every contribution directly.
    """

    def __init__(
        self,
        normaliser: Normaliser[E] | None = None,
        *,
        name: str | None = None,
        additive: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self._normaliser = normaliser
        self._additive = additive
        self._name = name
        self._emitter: DiagnosticEmitter = emitter or NullEmitter()
        self._state = GateState.BUFFERING
        self._registry: Registry[E] | None = None
        self._pending: dict[tuple[str, str], tuple[E, ...]] = {}

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_forwarding(self) -> bool:
        return self._state is GateState.FORWARDING

    @property
    def pending_count(self) -> int:
        """Number of buffered ``(key, origin)`` contributions awaiting a flush."""
        return len(self._pending)

    def submit(self, key: str, origin: str, entries: Sequence[E]) -> None:
        """Hand one origin's entries for ``key`` to the registry or the buffer."""
        if self._registry is not None:
            self._registry.register(key, origin, entries)
            return

        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Sequence):
            self._drop(key, origin, f"entries must be a list, got {type(entries).__name__}")
            return
        values = tuple(entries)
        if not values:
            return
        slot = (key, origin)
        current = self._pending.get(slot)
        merged = merge_entries(current, values, additive=self._additive)
        if merged == current:
            return
        self._pending[slot] = merged

    def submit_fragment(self, key: str, payload: Mapping[str, Any]) -> int:
        """Submit every contribution of a fragment, dropping malformed ones.

        Returns the number of contributions accepted.
        """
        if not isinstance(payload, Mapping):
            reason = f"fragment payload must be a mapping, got {type(payload).__name__}"
            self._emitter.warning(f"Ignoring fragment for '{key}': {reason}.")
            self._emitter.event("contribution_dropped", {"key": key, "reason": reason})
            return 0

        accepted = 0
        for origin, raw_entries in payload.items():
            if not isinstance(origin, str) or not origin:
                self._drop(key, str(origin), "origin must be a non-empty string")
                continue
            try:
                entries = self._normalise(raw_entries)
            except MalformedContributionError as exc:
                self._drop(key, origin, str(exc), exc)
                continue
            if not entries:
                continue
            self.submit(key, origin, entries)
            accepted += 1
        return accepted

    def activate(self, registry: Registry[E]) -> None:
        """Switch to forwarding and flush buffered contributions in arrival order."""
        if self._state is GateState.FORWARDING:
            return

        self._registry = registry
        self._state = GateState.FORWARDING
        pending, self._pending = self._pending, {}
        for (key, origin), entries in pending.items():
            registry.register(key, origin, entries)

        logger.debug("Gate %s flushed %d contributions", self._name or "<anonymous>", len(pending))
        self._emitter.event("gate_flushed", {"bucket": self._name, "count": len(pending)})

    def _normalise(self, raw_entries: Any) -> tuple[E, ...]:
        if self._normaliser is None:
            if isinstance(raw_entries, (str, bytes, Mapping)) or not isinstance(
                raw_entries, Sequence
            ):
                raise MalformedContributionError(
                    f"Expected a list of entries, got {type(raw_entries).__name__}."
                )
            return tuple(raw_entries)
        return self._normaliser(raw_entries)

    def _drop(
        self, key: str, origin: str, reason: str, exc: BaseException | None = None
    ) -> None:
        self._emitter.warning(f"Dropping contribution from '{origin}' for '{key}': {reason}", exc)
        self._emitter.event("contribution_dropped", {"key": key, "origin": origin, "reason": reason})


__all__ = ["FragmentGate", "GateState", "Normaliser"]

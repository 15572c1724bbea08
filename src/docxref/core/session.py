"""Per-session composition of registries, gates and fragment entry points."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from docxref.core.diagnostics import DiagnosticEmitter, NullEmitter
from docxref.core.gate import FragmentGate
from docxref.core.models import (
    Contribution,
    ImplementorDescriptor,
    SidebarItem,
    normalise_implementors,
    normalise_sidebar_items,
)
from docxref.core.registry import Registry


logger = logging.getLogger(__name__)


class IndexSession:
    """Cross-reference index for one documentation browsing session.

    Fragments call :meth:`register_implementors` or :meth:`register_sidebar`
    whenever they load; the consumer calls :meth:`mark_ready` once it can
    receive data. Both orders produce the same index.
    """

    def __init__(self, *, emitter: DiagnosticEmitter | None = None) -> None:
        self._emitter: DiagnosticEmitter = emitter or NullEmitter()
        self.implementors: Registry[ImplementorDescriptor] = Registry(emitter=self._emitter)
        self.sidebar: Registry[SidebarItem] = Registry(additive=True, emitter=self._emitter)
        self._implementor_gate: FragmentGate[ImplementorDescriptor] = FragmentGate(
            normalise_implementors, name="implementors", emitter=self._emitter
        )
        self._sidebar_gate: FragmentGate[SidebarItem] = FragmentGate(
            normalise_sidebar_items, name="sidebar", additive=True, emitter=self._emitter
        )

    @property
    def ready(self) -> bool:
        return self._implementor_gate.is_forwarding and self._sidebar_gate.is_forwarding

    @property
    def pending_count(self) -> int:
        return self._implementor_gate.pending_count + self._sidebar_gate.pending_count

    def register_implementors(self, key: str, payload: Mapping[str, Any]) -> int:
        """Fragment entry point for a trait's implementors, keyed by package name."""
        return self._implementor_gate.submit_fragment(key, payload)

    def register_sidebar(self, key: str, payload: Mapping[str, Any]) -> int:
        """Fragment entry point for a module's sidebar items, keyed by category."""
        return self._sidebar_gate.submit_fragment(key, payload)

    def mark_ready(self) -> None:
        """Signal consumer readiness, flushing buffered fragments on the first call."""
        if self.ready:
            logger.debug("Index session already marked ready")
            return
        self._implementor_gate.activate(self.implementors)
        self._sidebar_gate.activate(self.sidebar)

    def implementors_of(self, key: str) -> tuple[Contribution, ...]:
        return self.implementors.query(key)

    def sidebar_for(self, key: str) -> tuple[Contribution, ...]:
        return self.sidebar.query(key)

    def keys(self) -> frozenset[str]:
        """Return every trait and module path known to the session."""
        return self.implementors.keys() | self.sidebar.keys()


__all__ = ["IndexSession"]

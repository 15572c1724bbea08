"""Cross-reference index for generated API documentation."""

from __future__ import annotations

from docxref.core.config import IndexConfig, load_config
from docxref.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from docxref.core.exceptions import (
    FragmentParseError,
    IndexConfigError,
    MalformedContributionError,
    XrefIndexError,
)
from docxref.core.fragments import ParsedFragment, parse_fragment
from docxref.core.gate import FragmentGate, GateState
from docxref.core.loader import FragmentSource, LoadReport, build_session, discover_fragments
from docxref.core.models import Contribution, ImplementorDescriptor, SidebarItem
from docxref.core.registry import Registry, sort_by_origin
from docxref.core.session import IndexSession
from docxref.version import get_version


__version__ = get_version()

__all__ = [
    "Contribution",
    "DiagnosticEmitter",
    "FragmentGate",
    "FragmentParseError",
    "FragmentSource",
    "GateState",
    "ImplementorDescriptor",
    "IndexConfig",
    "IndexConfigError",
    "IndexSession",
    "LoadReport",
    "LoggingEmitter",
    "MalformedContributionError",
    "NullEmitter",
    "ParsedFragment",
    "Registry",
    "SidebarItem",
    "XrefIndexError",
    "__version__",
    "get_version",
    "build_session",
    "discover_fragments",
    "load_config",
    "parse_fragment",
    "sort_by_origin",
]

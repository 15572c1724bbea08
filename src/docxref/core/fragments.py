"""Parsers for the fragment scripts emitted by the documentation generator."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import json
import re
from typing import Any, Literal

from docxref.core.exceptions import FragmentParseError


FragmentKind = Literal["implementors", "sidebar"]

FRAGMENT_KINDS: tuple[FragmentKind, ...] = ("implementors", "sidebar")

RE_IMPLEMENTORS_DECL = re.compile(r"\bvar\s+implementors\s*=\s*\{\s*\}")
RE_IMPLEMENTORS_ASSIGN = re.compile(
    r'^[ \t]*implementors\[(?P<origin>"(?:[^"\\]|\\.)*")\]\s*=\s*(?P<value>.*?);?[ \t\r]*$',
    re.MULTILINE,
)
RE_SIDEBAR_CALL = re.compile(r"initSidebarItems\(\s*(?P<body>\{.*\})\s*\)\s*;?", re.DOTALL)


@dataclass(slots=True)
class ParsedFragment:
    """Raw payload extracted from one fragment script."""

    kind: FragmentKind
    payload: dict[str, Any] = field(default_factory=dict)
    issues: list[str] = field(default_factory=list)


def parse_implementors_script(text: str) -> ParsedFragment:
    """Collect the per-package implementor lists assigned by a script.

    A later assignment for the same package overrides the earlier one, as it
    would when the script runs. Assignments whose value cannot be decoded are
    reported in ``issues`` and skipped.
    """
    if not RE_IMPLEMENTORS_DECL.search(text):
        raise FragmentParseError("Script does not declare an implementors map.")

    fragment = ParsedFragment(kind="implementors")
    for lineno, match in _iter_assignments(text):
        try:
            origin = json.loads(match.group("origin"))
        except json.JSONDecodeError as exc:
            fragment.issues.append(f"line {lineno}: invalid package name ({exc.msg})")
            continue
        try:
            value = json.loads(match.group("value"))
        except json.JSONDecodeError as exc:
            fragment.issues.append(f"line {lineno}: invalid entries for '{origin}' ({exc.msg})")
            continue
        fragment.payload[origin] = value
    return fragment


def _iter_assignments(text: str) -> Iterator[tuple[int, re.Match[str]]]:
    for match in RE_IMPLEMENTORS_ASSIGN.finditer(text):
        yield text.count("\n", 0, match.start()) + 1, match


def parse_sidebar_script(text: str) -> ParsedFragment:
    """Decode the category map passed to ``initSidebarItems``."""
    match = RE_SIDEBAR_CALL.search(text)
    if match is None:
        raise FragmentParseError("Script does not call initSidebarItems.")
    try:
        payload = json.loads(match.group("body"))
    except json.JSONDecodeError as exc:
        raise FragmentParseError(f"Invalid sidebar payload: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise FragmentParseError("Sidebar payload must be an object.")
    return ParsedFragment(kind="sidebar", payload=payload)


def parse_fragment(text: str, kind: FragmentKind) -> ParsedFragment:
    """Parse ``text`` according to ``kind``."""
    if kind == "implementors":
        return parse_implementors_script(text)
    if kind == "sidebar":
        return parse_sidebar_script(text)
    raise FragmentParseError(
        f"Unknown fragment kind '{kind}'. Expected one of: {', '.join(FRAGMENT_KINDS)}."
    )


__all__ = [
    "FRAGMENT_KINDS",
    "FragmentKind",
    "ParsedFragment",
    "parse_fragment",
    "parse_implementors_script",
    "parse_sidebar_script",
]

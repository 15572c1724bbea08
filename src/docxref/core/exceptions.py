"""Exception hierarchy for the cross-reference index."""

from __future__ import annotations


class XrefIndexError(RuntimeError):
    """Base exception for cross-reference index failures."""


class MalformedContributionError(XrefIndexError):
    """Raised when a contribution payload cannot be normalised into entries."""


class FragmentParseError(XrefIndexError):
    """Raised when a generated fragment script does not have the expected shape."""


class IndexConfigError(XrefIndexError):
    """Raised when the index configuration or documentation root is invalid."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "FragmentParseError",
    "IndexConfigError",
    "MalformedContributionError",
    "XrefIndexError",
    "exception_hint",
    "exception_messages",
]

"""CLI command implementations exposed via `docxref.ui.cli`."""

from __future__ import annotations

from .implementors import implementors
from .keys import keys
from .sidebar import sidebar


__all__ = ["implementors", "keys", "sidebar"]

"""Show the implementors panel for one trait."""

from __future__ import annotations

import typer

from docxref.core.models import ImplementorDescriptor
from docxref.core.registry import filter_entries, sort_by_origin

from .._options import (
    ConfigOption,
    HideSyntheticOption,
    JsonOption,
    KeyArgument,
    RootArgument,
    SortOption,
)
from ..presenter import contributions_json, render_implementors
from ..state import emit_warning, get_cli_state
from ..utils import open_session, resolve_config


def _is_explicit(entry: ImplementorDescriptor) -> bool:
    return not entry.synthetic


def implementors(
    key: KeyArgument,
    root: RootArgument = None,
    config: ConfigOption = None,
    sort: SortOption = None,
    hide_synthetic: HideSyntheticOption = None,
    as_json: JsonOption = False,
) -> None:
    """List the implementations of a trait grouped by package."""
    settings = resolve_config(
        root, config, {"sort_origins": sort, "hide_synthetic": hide_synthetic}
    )
    session, _report = open_session(settings)

    contributions = session.implementors_of(key)
    if settings.hide_synthetic:
        contributions = filter_entries(contributions, _is_explicit)
    if settings.sort_origins:
        contributions = sort_by_origin(contributions)

    if as_json:
        typer.echo(contributions_json(contributions))
        return

    if not contributions:
        emit_warning(f"No entries for '{key}'.")
        return

    render_implementors(get_cli_state().console, key, contributions)


__all__ = ["implementors"]

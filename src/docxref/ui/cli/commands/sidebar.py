"""Show the sidebar listing of one module."""

from __future__ import annotations

import typer

from .._options import ConfigOption, JsonOption, KeyArgument, RootArgument
from ..presenter import contributions_json, render_sidebar
from ..state import emit_warning, get_cli_state
from ..utils import open_session, resolve_config


def sidebar(
    key: KeyArgument,
    root: RootArgument = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """List the items of a module grouped by category."""
    settings = resolve_config(root, config)
    session, _report = open_session(settings)

    contributions = session.sidebar_for(key)

    if as_json:
        typer.echo(contributions_json(contributions))
        return

    if not contributions:
        emit_warning(f"No entries for '{key}'.")
        return

    render_sidebar(get_cli_state().console, key, contributions)


__all__ = ["sidebar"]

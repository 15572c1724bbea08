"""List every trait and module path known to the index."""

from __future__ import annotations

from typing import Annotated

import typer

from .._options import ConfigOption, RootArgument
from ..presenter import render_keys
from ..state import emit_warning, get_cli_state
from ..utils import open_session, resolve_config


def keys(
    root: RootArgument = None,
    config: ConfigOption = None,
    kind: Annotated[
        str | None,
        typer.Option(
            "--kind",
            help="Only list keys of one bucket kind: implementors or sidebar.",
        ),
    ] = None,
    contains: Annotated[
        str | None,
        typer.Option(
            "--contains",
            help="Only list keys containing this text (case-insensitive).",
        ),
    ] = None,
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Print one key per line instead of a table."),
    ] = False,
) -> None:
    """List the keys of the merged index."""
    if kind is not None and kind not in ("implementors", "sidebar"):
        raise typer.BadParameter("Expected 'implementors' or 'sidebar'.", param_hint="--kind")

    settings = resolve_config(root, config)
    session, _report = open_session(settings)

    if kind == "implementors":
        candidates = session.implementors.keys()
    elif kind == "sidebar":
        candidates = session.sidebar.keys()
    else:
        candidates = session.keys()

    needle = (contains or "").lower()
    selected = sorted(key for key in candidates if needle in key.lower())

    if not selected:
        emit_warning("No index keys matched.")

    if plain:
        for key in selected:
            typer.echo(key)
        return

    render_keys(get_cli_state().console, session, selected)


__all__ = ["keys"]

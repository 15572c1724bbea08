"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer

from docxref.core.config import IndexConfig, load_config
from docxref.core.exceptions import IndexConfigError
from docxref.core.loader import LoadReport, build_session
from docxref.core.session import IndexSession

from .diagnostics import CliEmitter, summarise_problems
from .state import emit_error, get_cli_state


def resolve_config(
    root: Path | None,
    config_path: Path | None,
    overrides: Mapping[str, Any] | None = None,
) -> IndexConfig:
    """Load the configuration, applying CLI overrides; exit with code 1 on failure."""
    merged: dict[str, Any] = dict(overrides or {})
    if root is not None:
        merged["doc_root"] = root
    try:
        return load_config(config_path, overrides=merged)
    except IndexConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def open_session(config: IndexConfig) -> tuple[IndexSession, LoadReport]:
    """Build a ready session from ``config``, then summarise what could not be loaded."""
    state = get_cli_state()
    emitter = CliEmitter(state=state)
    try:
        session, report = build_session(config, emitter=emitter)
    except IndexConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    summarise_problems(state, issues=len(report.issues))
    return session, report


__all__ = ["open_session", "resolve_config"]

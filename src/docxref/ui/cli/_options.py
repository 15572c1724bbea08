"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

KeyArgument = Annotated[
    str,
    typer.Argument(
        metavar="KEY",
        help="Trait path (e.g. core::ops::arith::Neg) or module path (e.g. bson::document).",
    ),
]

RootArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="ROOT",
        help="Documentation build directory. Defaults to the configured doc_root.",
        file_okay=False,
        dir_okay=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a docxref.toml or pyproject.toml file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Print the result as JSON using the generated fragment wire format.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

SortOption = Annotated[
    bool | None,
    typer.Option(
        "--sort/--no-sort",
        help="Order packages alphabetically instead of in registration order.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

HideSyntheticOption = Annotated[
    bool | None,
    typer.Option(
        "--hide-synthetic/--show-synthetic",
        help="Omit compiler-derived implementations.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

__all__ = [
    "ConfigOption",
    "HideSyntheticOption",
    "JsonOption",
    "KeyArgument",
    "RootArgument",
    "SortOption",
]

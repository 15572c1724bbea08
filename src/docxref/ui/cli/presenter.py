"""Rich presenters for index query results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import json
from typing import TYPE_CHECKING, Any
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from docxref.core.models import Contribution, ImplementorDescriptor, SidebarItem
from docxref.core.session import IndexSession


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console


def signature_text(rendered: str) -> str:
    """Return a one-line plain-text rendering of a formatted signature."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(rendered, "html.parser")
    for line_break in soup.find_all("br"):
        line_break.replace_with(" ")
    text = soup.get_text().replace("\xa0", " ")
    return " ".join(text.split())


def contributions_payload(contributions: Iterable[Contribution]) -> dict[str, list[Any]]:
    """Map each origin to its entries in the generated wire format."""
    payload: dict[str, list[Any]] = {}
    for origin, entries in contributions:
        payload[origin] = [entry.to_wire() for entry in entries]
    return payload


def contributions_json(contributions: Iterable[Contribution]) -> str:
    return json.dumps(contributions_payload(contributions), indent=2, ensure_ascii=False)


def render_implementors(
    console: Console, key: str, contributions: Sequence[Contribution]
) -> None:
    """Print an implementors panel: one row per implementation, grouped by package."""
    from rich import box
    from rich.table import Table

    table = Table(
        title=f"Implementors of {key}",
        box=box.SQUARE,
        header_style="bold cyan",
    )
    table.add_column("Package", style="magenta", no_wrap=True)
    table.add_column("Implementation")
    table.add_column("Synthetic", justify="center")

    total = 0
    for origin, entries in contributions:
        for position, entry in enumerate(entries):
            descriptor: ImplementorDescriptor = entry
            table.add_row(
                origin if position == 0 else "",
                signature_text(descriptor.rendered_signature),
                "yes" if descriptor.synthetic else "",
                style="dim" if descriptor.synthetic else None,
            )
            total += 1

    table.caption = f"{total} implementation(s) across {len(contributions)} package(s)"
    console.print(table)


def render_sidebar(console: Console, key: str, contributions: Sequence[Contribution]) -> None:
    """Print the categorized items of a module sidebar."""
    from rich import box
    from rich.table import Table

    table = Table(title=f"Items in {key}", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Category", style="green", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Description")

    for category, entries in contributions:
        for position, entry in enumerate(entries):
            item: SidebarItem = entry
            table.add_row(category if position == 0 else "", item.name, item.description or "-")

    console.print(table)


def render_keys(
    console: Console,
    session: IndexSession,
    keys: Sequence[str],
) -> None:
    """Print a summary of known keys with their bucket kind and sizes."""
    from rich import box
    from rich.table import Table

    table = Table(title="Index keys", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Key", style="magenta")
    table.add_column("Kind", style="green")
    table.add_column("Contributions", justify="right")
    table.add_column("Entries", justify="right")

    if not keys:
        table.add_row("-", "-", "0", "0")
    for key in keys:
        for kind, registry in (("implementors", session.implementors), ("sidebar", session.sidebar)):
            if key not in registry:
                continue
            table.add_row(
                key,
                kind,
                str(len(registry.origins(key))),
                str(registry.entry_count(key)),
            )

    console.print(table)


__all__ = [
    "contributions_json",
    "contributions_payload",
    "render_implementors",
    "render_keys",
    "render_sidebar",
    "signature_text",
]

"""Pydantic models describing the entries carried by index fragments.

ImplementorDescriptor

`rendered_signature` (`str`, wire name `text`)
: Pre-formatted implementation signature produced by the documentation
  generator. Carried verbatim; only equality matters.

`synthetic` (`bool`)
: `True` when the implementation was derived by the compiler rather than
  written by hand. Consumers typically render these dimmed.

`type_parameters` (`tuple[str, ...]`, wire name `types`)
: Identifiers referenced by the signature, in declaration order.

SidebarItem

`name` (`str`)
: Item name listed under a sidebar category.

`description` (`str`)
: One-line summary, possibly empty. The generated wire format is a
  `[name, description]` pair.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from docxref.core.exceptions import MalformedContributionError


class ImplementorDescriptor(BaseModel):
    """One concrete implementation of a trait."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    rendered_signature: StrictStr = Field(alias="text", min_length=1)
    synthetic: StrictBool
    type_parameters: tuple[StrictStr, ...] = Field(default=(), alias="types")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-compatible mapping used by generated fragments."""
        return self.model_dump(mode="json", by_alias=True)


class SidebarItem(BaseModel):
    """A named item listed under one sidebar category of a module."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: StrictStr = Field(min_length=1)
    description: StrictStr = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(
                    f"Sidebar items must be [name, description] pairs, got {len(data)} values."
                )
            name, description = data
            return {"name": name, "description": description}
        return data

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_wire(self) -> list[str]:
        """Return the `[name, description]` pair used by generated fragments."""
        return [self.name, self.description]


class Contribution(NamedTuple):
    """One origin's ordered entries for an index key."""

    origin: str
    entries: tuple[Any, ...]


M = TypeVar("M", bound=BaseModel)


def _summarise_validation(exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "entry"
        details.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(details)


def normalise_entries(raw: Any, model: type[M]) -> tuple[M, ...]:
    """Validate a raw entries list into a tuple of ``model`` instances.

    Raises ``MalformedContributionError`` when ``raw`` is not a list or when any
    entry fails validation; a contribution is accepted or rejected as a whole.
    """
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Sequence):
        raise MalformedContributionError(
            f"Expected a list of entries, got {type(raw).__name__}."
        )

    entries: list[M] = []
    for position, item in enumerate(raw):
        if isinstance(item, model):
            entries.append(item)
            continue
        try:
            entries.append(model.model_validate(item))
        except ValidationError as exc:
            raise MalformedContributionError(
                f"Entry {position} is invalid ({_summarise_validation(exc)})."
            ) from exc
    return tuple(entries)


def normalise_implementors(raw: Any) -> tuple[ImplementorDescriptor, ...]:
    """Normalise one origin's raw implementor list."""
    return normalise_entries(raw, ImplementorDescriptor)


def normalise_sidebar_items(raw: Any) -> tuple[SidebarItem, ...]:
    """Normalise one category's raw sidebar pairs."""
    return normalise_entries(raw, SidebarItem)


__all__ = [
    "Contribution",
    "ImplementorDescriptor",
    "SidebarItem",
    "normalise_entries",
    "normalise_implementors",
    "normalise_sidebar_items",
]

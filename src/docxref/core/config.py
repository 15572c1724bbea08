"""Configuration model for loading a documentation build into an index.

IndexConfig

`doc_root` (`Path`)
: Documentation build directory holding the generated fragment scripts.
  Relative values resolve against the directory of the configuration file.

`implementors_dir` (`str`)
: Directory under `doc_root` holding trait implementor fragments.

`sidebar_filename` (`str`)
: File name of the per-module sidebar fragments.

`exclude` (`list[str]`)
: Glob patterns, relative to `doc_root`, of fragment files to skip.

`sort_origins` (`bool`)
: Present contributions sorted by package name instead of first-seen order.

`hide_synthetic` (`bool`)
: Omit compiler-derived implementations when presenting implementors.

`activate_first` (`bool`)
: Mark the session ready before loading fragments instead of after. The
  resulting index is identical; the switch exists to exercise both orders.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any


try:  # Python >=3.11
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.10
    import tomli as tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from docxref.core.exceptions import IndexConfigError


CONFIG_ENV_VAR = "DOCXREF_CONFIG"
CONFIG_FILENAME = "docxref.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class IndexConfig(BaseModel):
    """Options controlling fragment discovery and presentation."""

    model_config = ConfigDict(extra="forbid")

    doc_root: Path = Field(default=Path("."), description="Documentation build directory")
    implementors_dir: str = "implementors"
    sidebar_filename: str = "sidebar-items.js"
    exclude: list[str] = Field(default_factory=list)
    sort_origins: bool = False
    hide_synthetic: bool = False
    activate_first: bool = False

    @field_validator("implementors_dir", "sidebar_filename")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        candidate = value.strip().strip("/")
        if not candidate:
            raise ValueError("must not be empty")
        return candidate


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise IndexConfigError(f"Failed to read configuration {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise IndexConfigError(f"Invalid configuration {path}: {exc}") from exc


def _extract_table(path: Path, payload: Mapping[str, Any]) -> dict[str, Any]:
    if path.name != PYPROJECT_FILENAME:
        return dict(payload)
    tool = payload.get("tool")
    table = tool.get("docxref") if isinstance(tool, Mapping) else None
    if table is None:
        return {}
    if not isinstance(table, Mapping):
        raise IndexConfigError(f"[tool.docxref] in {path} must be a table.")
    return dict(table)


def _candidate_paths(path: Path | str | None) -> list[Path]:
    if path is not None:
        return [Path(path).expanduser()]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return [Path(env_path).expanduser()]
    cwd = Path.cwd()
    return [cwd / CONFIG_FILENAME, cwd / PYPROJECT_FILENAME]


def load_config(
    path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> IndexConfig:
    """Load the index configuration, falling back to defaults when absent.

    An explicit ``path`` (or ``DOCXREF_CONFIG``) must exist; the implicit
    ``docxref.toml`` and ``pyproject.toml`` lookups are optional.
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    data: dict[str, Any] = {}
    base_dir = Path.cwd()

    for candidate in _candidate_paths(path):
        if not candidate.is_file():
            if explicit:
                raise IndexConfigError(f"Configuration file not found: {candidate}")
            continue
        table = _extract_table(candidate, _read_toml(candidate))
        if not table and candidate.name == PYPROJECT_FILENAME and not explicit:
            continue
        data = table
        base_dir = candidate.resolve().parent
        break

    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = IndexConfig.model_validate(data)
    except ValidationError as exc:
        raise IndexConfigError(f"Invalid docxref configuration: {exc}") from exc

    if (overrides or {}).get("doc_root") is not None:
        config.doc_root = config.doc_root.expanduser().resolve()
    elif not config.doc_root.is_absolute():
        config.doc_root = (base_dir / config.doc_root).resolve()
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "IndexConfig",
    "load_config",
]

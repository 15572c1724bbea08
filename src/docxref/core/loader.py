"""Discovery and loading of fragment scripts from a documentation build."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from fnmatch import fnmatch
import logging
from pathlib import Path, PurePath

from docxref.core.config import IndexConfig
from docxref.core.diagnostics import DiagnosticEmitter, NullEmitter
from docxref.core.exceptions import FragmentParseError, IndexConfigError
from docxref.core.fragments import FragmentKind, parse_fragment
from docxref.core.session import IndexSession


logger = logging.getLogger(__name__)

KEY_SEPARATOR = "::"


@dataclass(slots=True, frozen=True)
class FragmentSource:
    """A fragment script together with the index key its location implies."""

    path: Path
    kind: FragmentKind
    key: str


@dataclass(slots=True)
class LoadReport:
    """Summary of a loading pass over fragment scripts."""

    fragments: int = 0
    contributions: int = 0
    skipped: list[Path] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.issues


def implementor_key(relative: PurePath, *, implementors_dir: str = "implementors") -> str | None:
    """Return the trait path for ``implementors/<module...>/<kind>.<Name>.js``."""
    parts = relative.parts
    if len(parts) < 2 or parts[0] != implementors_dir:
        return None
    filename = parts[-1]
    if not filename.endswith(".js"):
        return None
    _, sep, item = filename[: -len(".js")].partition(".")
    if not sep or not item:
        return None
    return KEY_SEPARATOR.join([*parts[1:-1], item])


def sidebar_key(relative: PurePath, *, sidebar_filename: str = "sidebar-items.js") -> str | None:
    """Return the module path for ``<module...>/sidebar-items.js``."""
    if relative.name != sidebar_filename:
        return None
    modules = relative.parts[:-1]
    if not modules:
        return None
    return KEY_SEPARATOR.join(modules)


def _is_excluded(relative: PurePath, patterns: Iterable[str]) -> bool:
    candidate = relative.as_posix()
    return any(fnmatch(candidate, pattern) for pattern in patterns)


def discover_fragments(root: Path, config: IndexConfig | None = None) -> list[FragmentSource]:
    """Return the fragment scripts under ``root`` ordered by relative path."""
    config = config or IndexConfig(doc_root=root)
    if not root.is_dir():
        raise IndexConfigError(f"Documentation root does not exist: {root}")

    sources: list[FragmentSource] = []
    scripts = sorted(root.rglob("*.js"), key=lambda item: item.relative_to(root).as_posix())
    for path in scripts:
        relative = path.relative_to(root)
        if _is_excluded(relative, config.exclude):
            logger.debug("Excluded fragment %s", relative)
            continue

        key = implementor_key(relative, implementors_dir=config.implementors_dir)
        if key is not None:
            sources.append(FragmentSource(path=path, kind="implementors", key=key))
            continue

        if relative.parts[0] == config.implementors_dir:
            continue
        key = sidebar_key(relative, sidebar_filename=config.sidebar_filename)
        if key is not None:
            sources.append(FragmentSource(path=path, kind="sidebar", key=key))
    return sources


def load_fragments(
    session: IndexSession,
    sources: Iterable[FragmentSource],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> LoadReport:
    """Read, parse and submit each fragment script to ``session``.

    Unreadable or unparsable scripts are reported and skipped.
    """
    emitter = emitter or NullEmitter()
    report = LoadReport()

    for source in sources:
        try:
            text = source.path.read_text(encoding="utf-8")
            parsed = parse_fragment(text, source.kind)
        except (OSError, UnicodeDecodeError, FragmentParseError) as exc:
            report.skipped.append(source.path)
            emitter.warning(f"Skipping fragment {source.path}: {exc}", exc)
            emitter.event("fragment_skipped", {"path": str(source.path), "reason": str(exc)})
            continue

        for issue in parsed.issues:
            report.issues.append(f"{source.path}: {issue}")
            emitter.warning(f"{source.path}: {issue}")

        if source.kind == "implementors":
            accepted = session.register_implementors(source.key, parsed.payload)
        else:
            accepted = session.register_sidebar(source.key, parsed.payload)

        report.fragments += 1
        report.contributions += accepted
        emitter.event("fragment_loaded", {"key": source.key, "accepted": accepted})

    return report


def build_session(
    config: IndexConfig,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[IndexSession, LoadReport]:
    """Load every fragment under ``config.doc_root`` into a ready session."""
    session = IndexSession(emitter=emitter)
    sources = discover_fragments(config.doc_root, config)
    if config.activate_first:
        session.mark_ready()
    report = load_fragments(session, sources, emitter=emitter)
    session.mark_ready()
    logger.debug(
        "Loaded %d fragments (%d contributions) from %s",
        report.fragments,
        report.contributions,
        config.doc_root,
    )
    return session, report


__all__ = [
    "FragmentSource",
    "KEY_SEPARATOR",
    "LoadReport",
    "build_session",
    "discover_fragments",
    "implementor_key",
    "load_fragments",
    "sidebar_key",
]

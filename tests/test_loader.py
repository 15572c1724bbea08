from __future__ import annotations

from pathlib import Path, PurePosixPath
import shutil

import pytest

from docxref.core.config import IndexConfig
from docxref.core.exceptions import IndexConfigError
from docxref.core.loader import (
    build_session,
    discover_fragments,
    implementor_key,
    load_fragments,
    sidebar_key,
)
from docxref.core.session import IndexSession


DATA_ROOT = Path(__file__).parent / "data" / "doc"


@pytest.fixture
def doc_root(tmp_path: Path) -> Path:
    target = tmp_path / "doc"
    shutil.copytree(DATA_ROOT, target)
    return target


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("implementors/core/ops/arith/trait.Neg.js", "core::ops::arith::Neg"),
        ("implementors/quote/to_tokens/trait.ToTokens.js", "quote::to_tokens::ToTokens"),
        ("implementors/core/marker/trait.Send.js", "core::marker::Send"),
        ("implementors/core/ops/arith/Neg.js", None),
        ("implementors/core/ops/arith/trait.Neg.json", None),
        ("bson/document/sidebar-items.js", None),
    ],
)
def test_implementor_key(relative: str, expected: str | None) -> None:
    assert implementor_key(PurePosixPath(relative)) == expected


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("bson/document/sidebar-items.js", "bson::document"),
        ("serde_with/sidebar-items.js", "serde_with"),
        ("sidebar-items.js", None),
        ("bson/document/search-index.js", None),
    ],
)
def test_sidebar_key(relative: str, expected: str | None) -> None:
    assert sidebar_key(PurePosixPath(relative)) == expected


def test_discover_fragments_orders_by_relative_path(doc_root: Path) -> None:
    (doc_root / "main.js").write_text("// runtime\n", encoding="utf-8")

    sources = discover_fragments(doc_root)

    assert [(source.kind, source.key) for source in sources] == [
        ("sidebar", "bson::document"),
        ("implementors", "core::fmt::UpperHex"),
        ("implementors", "core::iter::traits::iterator::Iterator"),
        ("implementors", "core::ops::arith::Neg"),
        ("implementors", "quote::to_tokens::ToTokens"),
        ("sidebar", "serde_with::rust"),
    ]


def test_discover_fragments_honours_exclude_patterns(doc_root: Path) -> None:
    config = IndexConfig(doc_root=doc_root, exclude=["implementors/core/*", "bson/*"])
    keys = [source.key for source in discover_fragments(doc_root, config)]
    assert keys == ["quote::to_tokens::ToTokens", "serde_with::rust"]


def test_discover_fragments_requires_existing_root(tmp_path: Path) -> None:
    with pytest.raises(IndexConfigError):
        discover_fragments(tmp_path / "missing")


def test_build_session_loads_every_fragment(doc_root: Path) -> None:
    session, report = build_session(IndexConfig(doc_root=doc_root))

    assert session.ready is True
    assert report.ok
    assert report.fragments == 6
    assert session.implementors.origins("core::ops::arith::Neg") == (
        "num_bigint",
        "time",
        "typenum",
    )
    assert session.sidebar.origins("bson::document") == ("enum", "struct", "type")
    assert "quote::to_tokens::ToTokens" in session.keys()


def test_activation_order_does_not_change_the_index(doc_root: Path) -> None:
    after, _ = build_session(IndexConfig(doc_root=doc_root))
    before, _ = build_session(IndexConfig(doc_root=doc_root, activate_first=True))

    assert after.keys() == before.keys()
    for key in after.keys():
        assert after.implementors_of(key) == before.implementors_of(key)
        assert after.sidebar_for(key) == before.sidebar_for(key)


def test_unparsable_fragment_is_skipped(doc_root: Path) -> None:
    broken = doc_root / "implementors" / "core" / "marker" / "trait.Send.js"
    broken.parent.mkdir(parents=True)
    broken.write_text("garbage", encoding="utf-8")

    session, report = build_session(IndexConfig(doc_root=doc_root))

    assert report.skipped == [broken]
    assert report.fragments == 6
    assert "core::marker::Send" not in session.keys()


def test_malformed_contribution_only_drops_its_origin(tmp_path: Path) -> None:
    script = tmp_path / "implementors" / "core" / "ops" / "arith" / "trait.Neg.js"
    script.parent.mkdir(parents=True)
    script.write_text(
        "\n".join(
            [
                "(function() {var implementors = {};",
                'implementors["time"] = [{"text":"impl Neg for Duration","synthetic":false,"types":[]}];',
                'implementors["broken"] = [{"synthetic":false,"types":[]}];',
                'implementors["bad_json"] = [{"text": nope}];',
                "})()",
            ]
        ),
        encoding="utf-8",
    )
    session = IndexSession()
    report = load_fragments(session, discover_fragments(tmp_path))
    session.mark_ready()

    assert report.contributions == 1
    assert len(report.issues) == 1
    assert session.implementors.origins("core::ops::arith::Neg") == ("time",)

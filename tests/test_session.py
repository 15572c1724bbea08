from __future__ import annotations

import pytest

from docxref.core.models import ImplementorDescriptor
from docxref.core.session import IndexSession


def _wire(text: str, *, synthetic: bool = False) -> dict[str, object]:
    return {"text": text, "synthetic": synthetic, "types": []}


def test_scenario_submission_order_is_kept() -> None:
    session = IndexSession()
    session.register_implementors(
        "Iterator", {"bson": [_wire("impl Iterator for Keys"), _wire("impl Iterator for Values")]}
    )
    session.register_implementors("Iterator", {"serde_json": [_wire("impl Iterator for Stream")]})
    session.mark_ready()

    result = session.implementors_of("Iterator")

    assert [origin for origin, _ in result] == ["bson", "serde_json"]
    assert [entry.rendered_signature for entry in result[0].entries] == [
        "impl Iterator for Keys",
        "impl Iterator for Values",
    ]


def test_scenario_fragments_on_both_sides_of_readiness() -> None:
    session = IndexSession()
    session.register_implementors("Neg", {"time": [_wire("impl Neg for Duration")]})
    assert session.implementors_of("Neg") == ()
    assert session.pending_count == 1

    session.mark_ready()
    session.register_implementors("Neg", {"num_bigint": [_wire("impl Neg for BigInt")]})

    assert [origin for origin, _ in session.implementors_of("Neg")] == ["time", "num_bigint"]
    assert session.pending_count == 0


def test_scenario_unknown_trait() -> None:
    session = IndexSession()
    session.mark_ready()
    assert session.implementors_of("NoSuchTrait") == ()
    assert session.sidebar_for("NoSuchTrait") == ()


def test_mark_ready_is_idempotent() -> None:
    session = IndexSession()
    assert session.ready is False
    session.mark_ready()
    session.mark_ready()
    assert session.ready is True


def test_sidebar_fragments_merge_additively_by_category() -> None:
    session = IndexSession()
    session.mark_ready()
    session.register_sidebar("bson::document", {"struct": [["Document", "A BSON document."]]})
    session.register_sidebar(
        "bson::document",
        {
            "enum": [["ValueAccessError", "Error accessing a value."]],
            "struct": [["Keys", ""], ["Document", "A BSON document."]],
        },
    )

    result = session.sidebar_for("bson::document")

    assert [category for category, _ in result] == ["struct", "enum"]
    assert [item.name for item in result[0].entries] == ["Document", "Keys"]


@pytest.mark.parametrize("ready_first", [True, False])
def test_sidebar_category_shared_across_fragments(ready_first: bool) -> None:
    session = IndexSession()
    if ready_first:
        session.mark_ready()
    session.register_sidebar("m", {"struct": [["A", ""]]})
    session.register_sidebar("m", {"struct": [["B", ""]]})
    session.register_sidebar("m", {"struct": [["A", ""]]})
    session.mark_ready()

    (contribution,) = session.sidebar_for("m")
    assert contribution.origin == "struct"
    assert [item.name for item in contribution.entries] == ["A", "B"]


def test_synthetic_flag_is_preserved() -> None:
    session = IndexSession()
    session.register_implementors(
        "Send", {"bson": [_wire("impl Send for Document", synthetic=True)]}
    )
    session.mark_ready()

    (contribution,) = session.implementors_of("Send")
    (descriptor,) = contribution.entries
    assert isinstance(descriptor, ImplementorDescriptor)
    assert descriptor.synthetic is True


def test_keys_cover_both_buckets() -> None:
    session = IndexSession()
    session.register_implementors("core::ops::arith::Neg", {"time": [_wire("impl Neg for Duration")]})
    session.register_sidebar("bson::document", {"type": [["ValueAccessResult", ""]]})
    session.register_sidebar("serde_with::rust", {"mod": []})
    session.mark_ready()

    assert session.keys() == {"core::ops::arith::Neg", "bson::document"}


def test_register_returns_accepted_count() -> None:
    session = IndexSession()
    accepted = session.register_implementors(
        "Neg",
        {"time": [_wire("impl Neg for Duration")], "broken": [{"text": "impl Neg"}]},
    )
    assert accepted == 1

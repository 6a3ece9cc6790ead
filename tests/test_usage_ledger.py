"""Usage ledger value semantics."""

from __future__ import annotations

from logic.usage_ledger import UsageLedger


def test_increment_returns_new_counter_without_mutating(make_item) -> None:
    ledger = UsageLedger(max_uses=3)
    item = make_item("a", "Grey Tee", "top", usage=1)

    bumped = ledger.increment(item)

    assert bumped.current == 2
    assert item.usage.current == 1
    updated = ledger.apply(item, bumped)
    assert updated.usage_count == 2
    assert updated is not item


def test_increment_at_limit_is_a_no_op(make_item) -> None:
    ledger = UsageLedger(max_uses=3)
    item = make_item("a", "Grey Tee", "top", usage=3)

    assert not ledger.available(item)
    assert ledger.increment(item).current == 3


def test_reset_goes_back_to_zero(make_item) -> None:
    ledger = UsageLedger()
    item = make_item("a", "Grey Tee", "top", usage=3)
    assert ledger.reset(item).current == 0


def test_validate_for_outfit_lists_unavailable_items(make_item) -> None:
    ledger = UsageLedger()
    fresh = make_item("a", "Grey Tee", "top", usage=0)
    worn = make_item("b", "Blue Jeans", "bottom", usage=3)

    check = ledger.validate_for_outfit([fresh, worn])

    assert not check.valid
    assert check.unavailable_ids == ["b"]
    assert "maximum usage limit" in check.message
    assert ledger.validate_for_outfit([fresh]).valid

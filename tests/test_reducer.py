"""Tests for the pure list reducer."""

import pytest

from product_board.dashboard import (
    AddProduct,
    RemoveProduct,
    ReplaceProduct,
    ResetTo,
    SetStatus,
    apply_mutation,
    dedupe,
    derive_speculative,
)
from product_board.models import ProductStatus


def ids(products):
    return [p.id for p in products]


def test_set_status(products):
    state = apply_mutation(products, SetStatus("p2", ProductStatus.APPROVED))

    assert [p.status for p in state] == [ProductStatus.APPROVED] * 2 + [ProductStatus.PENDING]
    assert products[1].status is ProductStatus.REJECTED


def test_add_prepends_by_default(products, product_factory):
    new = product_factory("p0")
    state = apply_mutation(products, AddProduct(new))

    assert ids(state) == ["p0", "p1", "p2", "p3"]


def test_add_at_index(products, product_factory):
    state = apply_mutation(products, AddProduct(product_factory("px"), index=2))

    assert ids(state) == ["p1", "p2", "px", "p3"]


def test_add_is_idempotent(products, product_factory):
    """Test re-applying an add that already landed does not duplicate it."""
    add = AddProduct(product_factory("p0"))
    once = apply_mutation(products, add)
    twice = apply_mutation(once, add)

    assert twice == once


def test_replace_and_remove(products, product_factory):
    newer = product_factory("p3", title="Renamed")
    state = apply_mutation(products, ReplaceProduct(newer))
    state = apply_mutation(state, RemoveProduct("p1"))

    assert ids(state) == ["p2", "p3"]
    assert state[1].title == "Renamed"


def test_replace_unknown_id_is_noop(products, product_factory):
    state = apply_mutation(products, ReplaceProduct(product_factory("nope")))
    assert state == tuple(products)


def test_reset_to(products):
    state = apply_mutation(products, ResetTo(tuple(products[:1])))
    assert ids(state) == ["p1"]


def test_unknown_mutation_rejected(products):
    with pytest.raises(TypeError):
        apply_mutation(products, object())


def test_dedupe_keeps_first(product_factory):
    first = product_factory("a", title="first")
    second = product_factory("a", title="second")
    state = dedupe([first, product_factory("b"), second])

    assert ids(state) == ["a", "b"]
    assert state[0].title == "first"


def test_derive_speculative_idempotent(products, product_factory):
    """Test deriving twice from the same inputs gives the same list."""
    pending = [
        AddProduct(product_factory("tmp")),
        SetStatus("p1", ProductStatus.REJECTED),
        AddProduct(product_factory("tmp")),
    ]
    once = derive_speculative(products, pending)
    twice = derive_speculative(products, pending)

    assert once == twice
    assert ids(once) == ["tmp", "p1", "p2", "p3"]
    assert once[1].status is ProductStatus.REJECTED


def test_derive_speculative_over_materialized_add(products, product_factory):
    """Test a provisional record present in confirmed and pending appears once."""
    provisional = product_factory("tmp")
    confirmed = apply_mutation(products, AddProduct(provisional))
    state = derive_speculative(confirmed, [AddProduct(provisional)])

    assert ids(state) == ["tmp", "p1", "p2", "p3"]


def test_derive_speculative_dedupes_confirmed(product_factory):
    """Test duplicates already in confirmed are collapsed, first wins."""
    server = product_factory("x", title="server copy")
    stale = product_factory("x", title="stale copy")
    state = derive_speculative([server, stale], [])

    assert len(state) == 1
    assert state[0].title == "server copy"


def test_reducer_does_not_mutate_input(products):
    before = list(products)
    apply_mutation(products, RemoveProduct("p1"))
    apply_mutation(products, SetStatus("p2", ProductStatus.PENDING))

    assert products == before

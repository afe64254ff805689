"""Pure functions deriving product lists from mutations."""

from typing import Iterable

from ..models import Product
from .mutations import (
    AddProduct,
    Mutation,
    RemoveProduct,
    ReplaceProduct,
    ResetTo,
    SetStatus,
)

ProductList = tuple[Product, ...]


def dedupe(products: Iterable[Product]) -> ProductList:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    kept = []
    for product in products:
        if product.id in seen:
            continue
        seen.add(product.id)
        kept.append(product)
    return tuple(kept)


def apply_mutation(state: Iterable[Product], mutation: Mutation) -> ProductList:
    """Return the list that results from applying one mutation. The input is never changed."""
    state = tuple(state)

    if isinstance(mutation, SetStatus):
        return tuple(
            p.with_status(mutation.status) if p.id == mutation.product_id else p
            for p in state
        )
    if isinstance(mutation, AddProduct):
        # Already materialized, e.g. a provisional record written to both lists
        if any(p.id == mutation.product.id for p in state):
            return state
        index = max(0, min(mutation.index, len(state)))
        return state[:index] + (mutation.product,) + state[index:]
    if isinstance(mutation, ReplaceProduct):
        return tuple(
            mutation.product if p.id == mutation.product.id else p
            for p in state
        )
    if isinstance(mutation, RemoveProduct):
        return tuple(p for p in state if p.id != mutation.product_id)
    if isinstance(mutation, ResetTo):
        return tuple(mutation.products)

    raise TypeError(f"Unknown mutation: {mutation!r}")


def derive_speculative(confirmed: Iterable[Product], pending: Iterable[Mutation]) -> ProductList:
    """Fold pending mutations over the confirmed list and dedupe for rendering."""
    state = tuple(confirmed)
    for mutation in pending:
        state = apply_mutation(state, mutation)
    return dedupe(state)

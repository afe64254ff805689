"""Local mutations that can be layered over the confirmed product list."""

from dataclasses import dataclass
from typing import Union

from ..models import Product, ProductStatus


@dataclass(frozen=True)
class SetStatus:
    """Give one product another status."""
    product_id: str
    status: ProductStatus


@dataclass(frozen=True)
class AddProduct:
    """Insert a product (at the front unless an index is given)."""
    product: Product
    index: int = 0


@dataclass(frozen=True)
class ReplaceProduct:
    """Swap a product for a newer copy with the same id."""
    product: Product


@dataclass(frozen=True)
class RemoveProduct:
    """Drop one product."""
    product_id: str


@dataclass(frozen=True)
class ResetTo:
    """Replace the whole list."""
    products: tuple[Product, ...]


Mutation = Union[SetStatus, AddProduct, ReplaceProduct, RemoveProduct, ResetTo]

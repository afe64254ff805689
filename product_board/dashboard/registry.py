"""Tracks which products have an intent in flight."""

from contextlib import contextmanager
from typing import Iterable, Iterator

from ..errors import OperationInProgressError


class OperationRegistry:
    """Per-product in-flight set. One mutating intent per product at a time."""

    def __init__(self):
        self._busy: set[str] = set()

    def is_busy(self, product_id: str) -> bool:
        return product_id in self._busy

    @property
    def busy_ids(self) -> frozenset[str]:
        return frozenset(self._busy)

    def acquire(self, product_id: str) -> None:
        """Mark a product busy. Raises OperationInProgressError if it already is."""
        if product_id in self._busy:
            raise OperationInProgressError(product_id)
        self._busy.add(product_id)

    def acquire_all(self, product_ids: Iterable[str]) -> None:
        """Mark several products busy, all or none."""
        product_ids = list(product_ids)
        for product_id in product_ids:
            if product_id in self._busy:
                raise OperationInProgressError(product_id)
        self._busy.update(product_ids)

    def release(self, *product_ids: str) -> None:
        for product_id in product_ids:
            self._busy.discard(product_id)

    @contextmanager
    def hold(self, *product_ids: str) -> Iterator[None]:
        """Keep products busy for the duration of the block."""
        self.acquire_all(product_ids)
        try:
            yield
        finally:
            self.release(*product_ids)

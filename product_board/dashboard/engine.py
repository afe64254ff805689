"""Optimistic reconciliation of the local product list with the remote store.

The engine keeps two views of the list. ``confirmed`` is the last state
known to match the store. ``products`` is the speculative view: the
confirmed list with every in-flight mutation folded over it, which is
what gets rendered.

Each intent applies its change synchronously, notifies listeners, and
only then awaits the store. When the call succeeds the store's copy is
merged into ``confirmed``; when it fails the intent's change is undone,
``error`` is set and the method returns ``False``. Remote failures never
propagate out of the engine. Caller mistakes (wrong role, unknown id,
product already busy, invalid create payload) raise before anything is
applied.
"""

import asyncio
import logging
from contextlib import contextmanager
from itertools import count
from typing import Any, Callable, Iterable, Iterator, Optional
from uuid import uuid4

from ..client import RemoteStore
from ..errors import (
    PartialBulkFailure,
    RemoteOperationFailure,
    RoleNotAllowedError,
    UnknownProductError,
)
from ..models import Product, ProductCreate, ProductStatus, Role, utcnow, validate_create_payload
from .mutations import AddProduct, Mutation, RemoveProduct, ReplaceProduct, ResetTo, SetStatus
from .reducer import ProductList, apply_mutation, dedupe, derive_speculative
from .registry import OperationRegistry

logger = logging.getLogger("product_board.dashboard")

ADMIN_INTENTS = frozenset({"create", "delete", "reset_all"})
INTENTS = ADMIN_INTENTS | {"change_status", "refresh"}

STATUS_ERROR = "Unable to update status. Please try again."
CREATE_ERROR = "Unable to add product. Please try again."
DELETE_ERROR = "Unable to delete product. Please try again."
RESET_ERROR = "Unable to reset products. Please try again."
REFRESH_ERROR = "Unable to load products. Please try again."

Listener = Callable[["ReconciliationEngine"], Any]


class ReconciliationEngine:
    """Owns the product list shown on the dashboard."""

    def __init__(self, store: RemoteStore, role: Role, products: Iterable[Product] = ()):
        self.store = store
        self.role = Role(role)
        self.registry = OperationRegistry()

        self._confirmed: ProductList = dedupe(products)
        self._pending: dict[int, Mutation] = {}
        self._tokens = count()
        self._provisional: set[str] = set()
        self._deleting: set[str] = set()
        self._resetting = False
        self._listeners: list[Listener] = []

        self.error: Optional[str] = None
        self.last_failure: Optional[RemoteOperationFailure] = None

    # ------------------------------------------------------------------
    # Reading state
    # ------------------------------------------------------------------

    @property
    def confirmed(self) -> ProductList:
        return self._confirmed

    @property
    def pending(self) -> tuple[Mutation, ...]:
        return tuple(self._pending.values())

    @property
    def products(self) -> ProductList:
        """Speculative list for rendering, deduplicated by id."""
        return derive_speculative(self._confirmed, self._pending.values())

    def visible_products(self, approved_only: bool = False) -> ProductList:
        products = self.products
        if approved_only:
            return tuple(p for p in products if p.status is ProductStatus.APPROVED)
        return products

    def get(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def counts(self) -> dict[ProductStatus, int]:
        totals = {status: 0 for status in ProductStatus}
        for product in self.products:
            totals[product.status] += 1
        return totals

    def is_busy(self, product_id: str) -> bool:
        return self.registry.is_busy(product_id)

    @property
    def creating(self) -> bool:
        return bool(self._provisional)

    @property
    def resetting(self) -> bool:
        return self._resetting

    @property
    def settled(self) -> bool:
        """True when nothing is in flight, so products == confirmed."""
        return not self._pending and not self.registry.busy_ids

    def can(self, intent: str) -> bool:
        """Whether the current role is offered this intent."""
        if intent not in INTENTS:
            raise ValueError(f"Unknown intent: {intent}")
        return intent not in ADMIN_INTENTS or self.role is Role.ADMIN

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(engine)`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    async def change_status(self, product_id: str, status: ProductStatus) -> bool:
        """Set a product's status optimistically, then confirm with the store."""
        status = ProductStatus(status)
        self._require("change_status")
        self._locate(product_id)

        with self._holding(product_id):
            self._begin()
            token = self._layer(SetStatus(product_id, status))
            self._notify()
            logger.debug("Status change %s -> %s dispatched", product_id, status.value)

            try:
                updated = await self.store.update_status(product_id, status)
            except Exception as exc:
                self._surface(RemoteOperationFailure("update-status", STATUS_ERROR, product_id, exc))
                return False
            else:
                self._commit(ReplaceProduct(updated))
                return True
            finally:
                self._settle(token)

    async def create(self, payload: Any) -> bool:
        """
        Add a product optimistically under a provisional id.

        Raises ValidationError for a bad payload before anything is applied.

        Returns:
            True once the store's record replaced the provisional one
        """
        self._require("create")
        data = validate_create_payload(payload)
        provisional = self._provisional_product(data)

        with self._holding(provisional.id):
            self._provisional.add(provisional.id)
            self._begin()
            self._commit(AddProduct(provisional))
            # No-op on the list already holding it; kept so the pending view names the add
            token = self._layer(AddProduct(provisional))
            self._notify()
            logger.debug("Create dispatched for provisional product %s", provisional.id)

            saved = None
            try:
                saved = await self.store.create_product(data)
            except Exception as exc:
                self._surface(RemoteOperationFailure("create", CREATE_ERROR, cause=exc))
                return False
            finally:
                without = apply_mutation(self._confirmed, RemoveProduct(provisional.id))
                self._confirmed = without if saved is None else dedupe((saved,) + without)
                self._settle(token)
                self._provisional.discard(provisional.id)

        logger.info("Product %s stored as %s", provisional.id, saved.id)
        return True

    async def delete(self, product_id: str) -> bool:
        """Remove a product optimistically; it reappears in place if the store refuses."""
        self._require("delete")
        index, product = self._locate(product_id)

        with self._holding(product_id):
            self._deleting.add(product_id)
            self._begin()
            self._commit(RemoveProduct(product_id))
            self._notify()
            logger.debug("Delete dispatched for %s", product_id)

            deleted = False
            try:
                await self.store.delete_product(product_id)
                deleted = True
            except Exception as exc:
                self._surface(RemoteOperationFailure("delete", DELETE_ERROR, product_id, exc))
            finally:
                # Also reached on cancellation
                if not deleted:
                    self._commit(AddProduct(product, index))
                self._deleting.discard(product_id)

        return deleted

    async def reset_all_to_pending(self) -> bool:
        """
        Set every product back to PENDING with one concurrent call per product.

        All or nothing locally: if any call fails the whole batch is rolled
        back, even though other calls may already have committed remotely.
        The client then disagrees with the store until the next refresh.
        """
        self._require("reset_all")
        snapshot = tuple(p for p in self._confirmed if p.id not in self._provisional)
        ids = [p.id for p in snapshot]

        with self._holding(*ids):
            self._resetting = True
            self._begin()
            self._commit(*(SetStatus(product_id, ProductStatus.PENDING) for product_id in ids))
            self._notify()
            logger.debug("Bulk reset dispatched for %d products", len(ids))

            committed = False
            try:
                results = await asyncio.gather(
                    *(self.store.update_status(product_id, ProductStatus.PENDING) for product_id in ids),
                    return_exceptions=True,
                )
                failures = [(pid, r) for pid, r in zip(ids, results) if isinstance(r, BaseException)]
                if failures:
                    failed = [pid for pid, _ in failures]
                    self._surface(PartialBulkFailure(
                        "reset-all",
                        RESET_ERROR,
                        failed_ids=failed,
                        succeeded_ids=[pid for pid in ids if pid not in failed],
                        cause=failures[0][1],
                    ))
                else:
                    self._commit(*(ReplaceProduct(updated) for updated in results))
                    committed = True
            finally:
                if not committed:
                    self._commit(*(ReplaceProduct(p) for p in snapshot))
                self._resetting = False

        return committed

    async def refresh(self) -> bool:
        """Reload the confirmed list from the store."""
        self._begin()
        try:
            products = await self.store.list_products()
        except Exception as exc:
            self._surface(RemoteOperationFailure("list", REFRESH_ERROR, cause=exc))
            self._notify()
            return False

        self._commit(ResetTo(dedupe(p for p in products if p.id not in self._deleting)))
        logger.debug("Loaded %d products", len(self._confirmed))
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, intent: str) -> None:
        if not self.can(intent):
            raise RoleNotAllowedError(self.role.value, intent)

    def _locate(self, product_id: str) -> tuple[int, Product]:
        for index, product in enumerate(self._confirmed):
            if product.id == product_id:
                return index, product
        raise UnknownProductError(product_id)

    def _provisional_product(self, data: ProductCreate) -> Product:
        now = utcnow()
        return Product(
            id=str(uuid4()),
            title=data.title,
            description=data.description,
            image_urls=list(data.image_urls),
            product_url=data.product_url,
            price=data.price,
            status=ProductStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @contextmanager
    def _holding(self, *product_ids: str) -> Iterator[None]:
        """Keep products busy for the block, then render the settled state."""
        entered = False
        try:
            with self.registry.hold(*product_ids):
                entered = True
                yield
        finally:
            if entered:
                self._notify()

    def _begin(self) -> None:
        self.error = None
        self.last_failure = None

    def _layer(self, mutation: Mutation) -> int:
        token = next(self._tokens)
        self._pending[token] = mutation
        return token

    def _settle(self, token: int) -> None:
        self._pending.pop(token, None)

    def _commit(self, *mutations: Mutation) -> None:
        for mutation in mutations:
            self._confirmed = apply_mutation(self._confirmed, mutation)

    def _surface(self, failure: RemoteOperationFailure) -> None:
        self.error = failure.message
        self.last_failure = failure
        logger.warning(
            "%s failed%s, rolled back: %s",
            failure.operation,
            f" for {failure.product_id}" if failure.product_id else "",
            failure.cause or failure,
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

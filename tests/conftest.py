"""Shared fixtures: sample products and an in-memory remote store."""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest

from product_board.errors import GatewayError
from product_board.models import Product, ProductCreate, ProductStatus

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


def make_product(product_id: str, status: ProductStatus = ProductStatus.PENDING, hours: int = 0, **fields) -> Product:
    """Build a stored-looking product."""
    created = BASE_TIME + timedelta(hours=hours)
    data = dict(
        id=product_id,
        title=f"Product {product_id}",
        description=None,
        image_urls=[f"https://img.example.com/{product_id}.jpg"],
        product_url=f"https://shop.example.com/{product_id}",
        price="499.00",
        status=status,
        created_at=created,
        updated_at=created,
    )
    data.update(fields)
    return Product(**data)


class FakeStore:
    """RemoteStore double. Calls can be failed or held open per product id."""

    def __init__(self, products=()):
        self.products = {p.id: p for p in products}
        self.calls: list[tuple[str, Optional[str]]] = []
        self.fail_ids: set[str] = set()
        self.fail_create = False
        self.fail_list = False
        self.gates: dict[str, asyncio.Event] = {}
        self.on_call: Optional[Callable[[str, Optional[str]], None]] = None
        self._next_id = 1
        self._clock = BASE_TIME + timedelta(days=1)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def _enter(self, operation: str, product_id: Optional[str] = None) -> None:
        self.calls.append((operation, product_id))
        if self.on_call:
            self.on_call(operation, product_id)
        gate = self.gates.get(product_id or operation)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)

    async def list_products(self) -> list[Product]:
        await self._enter("list")
        if self.fail_list:
            raise GatewayError(500, "Unable to load products")
        return sorted(self.products.values(), key=lambda p: p.created_at, reverse=True)

    async def create_product(self, payload: ProductCreate) -> Product:
        await self._enter("create")
        if self.fail_create:
            raise GatewayError(500, "Unable to create product")
        now = self._tick()
        product = Product(
            id=f"srv-{self._next_id}",
            title=payload.title,
            description=payload.description,
            image_urls=payload.image_urls,
            product_url=payload.product_url,
            price=payload.price,
            status=ProductStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self.products[product.id] = product
        return product

    async def update_status(self, product_id: str, status: ProductStatus) -> Product:
        await self._enter("update-status", product_id)
        if product_id in self.fail_ids or product_id not in self.products:
            raise GatewayError(404 if product_id not in self.products else 500, "Unable to update product")
        updated = self.products[product_id].model_copy(
            update={"status": ProductStatus(status), "updated_at": self._tick()}
        )
        self.products[product_id] = updated
        return updated

    async def delete_product(self, product_id: str) -> None:
        await self._enter("delete", product_id)
        if product_id in self.fail_ids or product_id not in self.products:
            raise GatewayError(404, "Product not found")
        del self.products[product_id]


@pytest.fixture
def products():
    """Three products, newest first."""
    return [
        make_product("p1", ProductStatus.APPROVED, hours=3),
        make_product("p2", ProductStatus.REJECTED, hours=2),
        make_product("p3", ProductStatus.PENDING, hours=1),
    ]


@pytest.fixture
def store(products):
    return FakeStore(products)


@pytest.fixture
def valid_payload():
    return {
        "title": "Desk Lamp",
        "description": "Warm white",
        "imageUrls": ["https://img.example.com/lamp-1.jpg", "https://img.example.com/lamp-2.jpg"],
        "productUrl": "https://shop.example.com/lamp",
        "price": "1299.50",
    }


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def store_factory():
    return FakeStore

"""HTTP client for the remote product store."""

import logging
from typing import Optional, Protocol

import httpx

from .config import client_config
from .errors import GatewayError
from .models import Product, ProductCreate, ProductStatus, Role

logger = logging.getLogger("product_board.client")


class RemoteStore(Protocol):
    """Operations the dashboard engine needs from a product store."""

    async def list_products(self) -> list[Product]: ...

    async def create_product(self, payload: ProductCreate) -> Product: ...

    async def update_status(self, product_id: str, status: ProductStatus) -> Product: ...

    async def delete_product(self, product_id: str) -> None: ...


def _raise_for_status(response: httpx.Response) -> None:
    """Turn a non-success response into a GatewayError carrying the server's message."""
    if response.is_success:
        return
    try:
        body = response.json()
    except ValueError:
        body = response.text
    detail = body.get("detail", "") if isinstance(body, dict) else body
    raise GatewayError(response.status_code, str(detail))


class ProductStoreClient:
    """Client for the product store REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = client_config
        self.base_url = (base_url or self.config.base_url).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.role: Optional[Role] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.config.timeout,
            transport=self._transport,
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not started. Use 'async with' or call start() first.")
        return self._client

    async def login(self, password: str) -> Role:
        """
        Log in with a shared password.

        The session cookie is kept in the client's cookie jar.

        Returns:
            The role granted by the password
        """
        response = await self.client.post("/api/auth/login", json={"password": password})
        _raise_for_status(response)
        self.role = Role(response.json()["role"])
        logger.info("Logged in as %s", self.role.value)
        return self.role

    async def logout(self) -> None:
        """Drop the session."""
        response = await self.client.post("/api/auth/logout")
        _raise_for_status(response)
        self.client.cookies.clear()
        self.role = None

    async def list_products(self) -> list[Product]:
        """Get all products, newest created first."""
        response = await self.client.get("/api/products")
        _raise_for_status(response)
        return [Product.model_validate(item) for item in response.json()]

    async def create_product(self, payload: ProductCreate) -> Product:
        """
        Create a product.

        Args:
            payload: Validated create payload

        Returns:
            The stored product with its server-assigned id
        """
        response = await self.client.post("/api/products", json=payload.to_wire())
        _raise_for_status(response)
        return Product.model_validate(response.json())

    async def update_status(self, product_id: str, status: ProductStatus) -> Product:
        """Set a product's status and return the stored record."""
        response = await self.client.patch(
            f"/api/products/{product_id}/status",
            json={"status": ProductStatus(status).value},
        )
        _raise_for_status(response)
        return Product.model_validate(response.json())

    async def delete_product(self, product_id: str) -> None:
        """Delete a product."""
        response = await self.client.delete(f"/api/products/{product_id}")
        _raise_for_status(response)

"""API endpoints for listing and reviewing products."""

import logging
from fastapi import APIRouter, Depends, HTTPException

from ...errors import ProductNotFoundError, ValidationError
from ...models import ProductStatus, Role, validate_create_payload
from ...store.models import DeleteResponse, ProductCreateRequest, StatusUpdateRequest
from ...store.service import ProductService
from ...database import Database
from ..dependencies import require_admin, require_session

logger = logging.getLogger("product_board.api")

router = APIRouter()

# Global database (initialized on startup)
_database = None


def get_product_service() -> ProductService:
    """Dependency to get product service."""
    global _database
    if _database is None:
        _database = Database()
    return ProductService(_database)


@router.get("")
async def list_products(
    role: Role = Depends(require_session),
    service: ProductService = Depends(get_product_service),
):
    """List all products, newest first."""
    products = await service.list_products()
    return [p.to_wire() for p in products]


@router.post("")
async def create_product(
    data: ProductCreateRequest,
    role: Role = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    """
    Create a product (admin only).

    - title, productUrl and price are required
    - at least one non-blank image URL is required
    - status always starts as PENDING
    """
    if not data.title or not data.productUrl or data.price in (None, ""):
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        payload = validate_create_payload(data.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="; ".join(e.messages))

    try:
        product = await service.create_product(payload)
    except Exception:
        logger.exception("Unable to create product")
        raise HTTPException(status_code=500, detail="Unable to create product")
    return product.to_wire()


@router.patch("/{product_id}/status")
async def update_status(
    product_id: str,
    data: StatusUpdateRequest,
    role: Role = Depends(require_session),
    service: ProductService = Depends(get_product_service),
):
    """Change a product's status (any role, any transition)."""
    try:
        status = ProductStatus(data.status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status")

    try:
        product = await service.update_status(product_id, status)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except Exception:
        logger.exception("Unable to update product %s", product_id)
        raise HTTPException(status_code=500, detail="Unable to update product")
    return product.to_wire()


@router.delete("/{product_id}", response_model=DeleteResponse)
async def delete_product(
    product_id: str,
    role: Role = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    """Delete a product (admin only)."""
    try:
        await service.delete_product(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except Exception:
        logger.exception("Unable to delete product %s", product_id)
        raise HTTPException(status_code=500, detail="Unable to delete product")
    return DeleteResponse(success=True)

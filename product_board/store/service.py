"""Product store service layer."""

import logging
from uuid import uuid4

from sqlalchemy import select
from ..database import Database
from ..errors import ProductNotFoundError
from ..models import Product, ProductCreate, ProductStatus, utcnow
from .models import ProductORM

logger = logging.getLogger("product_board.store")


class ProductService:
    """Service for managing reviewed products."""

    def __init__(self, database: Database):
        self.database = database

    async def list_products(self) -> list[Product]:
        """List all products, newest created first."""
        async with self.database.transaction() as session:
            result = await session.execute(
                select(ProductORM).order_by(ProductORM.created_at.desc())
            )
            return [p.to_product() for p in result.scalars()]

    async def create_product(self, data: ProductCreate) -> Product:
        """Create a product. New products always start out PENDING."""
        now = utcnow()
        product = ProductORM(
            id=str(uuid4()),
            title=data.title,
            description=data.description,
            image_urls=list(data.image_urls),
            product_url=data.product_url,
            price=data.price,
            status=ProductStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        async with self.database.transaction() as session:
            session.add(product)

        logger.info("Created product %s (%s)", product.id, product.title)
        return product.to_product()

    async def update_status(self, product_id: str, status: ProductStatus) -> Product:
        """Set a product's status. Any status may follow any other."""
        async with self.database.transaction() as session:
            product = await session.get(ProductORM, product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            product.status = ProductStatus(status).value
            product.updated_at = utcnow()
            await session.flush()

            logger.info("Product %s is now %s", product_id, product.status)
            return product.to_product()

    async def delete_product(self, product_id: str) -> None:
        """Hard-delete a product."""
        async with self.database.transaction() as session:
            product = await session.get(ProductORM, product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            await session.delete(product)

        logger.info("Deleted product %s", product_id)

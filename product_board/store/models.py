"""Product store tables and API schemas."""

from typing import Any, Optional
from pydantic import BaseModel
from sqlalchemy import Column, String, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base

from ..models import Product, utcnow

Base = declarative_base()


# ============ SQLAlchemy ORM Models ============

class ProductORM(Base):
    """SQLAlchemy model for products table."""
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    image_urls = Column(JSON, default=list)
    product_url = Column(String, nullable=False)
    # Kept as text so the decimal digits survive exactly
    price = Column(String, nullable=False)
    status = Column(String, nullable=False, default="PENDING", index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            title=self.title,
            description=self.description,
            image_urls=self.image_urls or [],
            product_url=self.product_url,
            price=self.price,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


# ============ Pydantic Models (API) ============

class ProductCreateRequest(BaseModel):
    """Loose create body; required fields are checked by the router so it can answer 400."""
    title: Optional[str] = None
    description: Optional[str] = None
    imageUrls: Optional[list[Any]] = None
    productUrl: Optional[str] = None
    price: Optional[Any] = None


class StatusUpdateRequest(BaseModel):
    """Schema for a status change."""
    status: Optional[str] = None


class LoginRequest(BaseModel):
    """Schema for a login attempt."""
    password: str = ""


class SessionResponse(BaseModel):
    """Schema for the resolved session role."""
    role: str


class DeleteResponse(BaseModel):
    """Schema for delete acknowledgement."""
    success: bool = True

"""Data models for reviewed products."""

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .errors import ValidationError


class ProductStatus(str, Enum):
    """Review status enum."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Role(str, Enum):
    """Session role, decided by which shared password was used."""
    ADMIN = "admin"
    USER = "user"


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Map a session cookie value to a role (``None`` means no session)."""
    if value in ("admin", "user"):
        return Role(value)
    # Sessions issued before roles existed
    if value == "authenticated":
        return Role.USER
    return None


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ============ Price helpers ============

def parse_price(value: Any) -> Decimal:
    """Parse price text for validation. Raises ValueError when unusable."""
    if value is None or isinstance(value, bool):
        raise ValueError("Price is required")
    text = str(value).strip()
    if not text:
        raise ValueError("Price is required")
    try:
        price = Decimal(text)
    except InvalidOperation:
        raise ValueError("Price must be numeric") from None
    if not price.is_finite():
        raise ValueError("Price must be numeric")
    if price < 0:
        raise ValueError("Price must not be negative")
    return price


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_price(value: str) -> str:
    """Render price text as rupees (``₹1,23,456.50``); unparsable text is returned as is."""
    try:
        price = parse_price(value)
    except ValueError:
        return value
    whole, fraction = f"{price.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):f}".split(".")
    return f"₹{_group_indian(whole)}.{fraction}"


def parse_image_urls(text: str) -> list[str]:
    """Split free-form image URL input on newlines and commas."""
    return [url.strip() for url in re.split(r"[\n,]+", text or "") if url.strip()]


# ============ Pydantic Models ============

class Product(BaseModel):
    """Product record as served by the store. Instances are immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_urls: list[str] = Field(..., min_length=1, alias="imageUrls")
    product_url: str = Field(..., alias="productUrl")
    price: str = Field(..., description="Exact decimal text")
    status: ProductStatus = ProductStatus.PENDING
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("price", mode="before")
    @classmethod
    def _price_text(cls, value: Any) -> str:
        parse_price(value)
        return str(value).strip()

    @model_validator(mode="after")
    def _timestamps_ordered(self) -> "Product":
        if self.created_at > self.updated_at:
            raise ValueError("createdAt must not be after updatedAt")
        return self

    def with_status(self, status: ProductStatus) -> "Product":
        """Copy of this product carrying another status."""
        return self.model_copy(update={"status": ProductStatus(status)})

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ProductCreate(BaseModel):
    """Payload for creating a product."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    image_urls: list[str] = Field(..., alias="imageUrls")
    product_url: str = Field(..., alias="productUrl")
    price: str

    @field_validator("title", "product_url", mode="before")
    @classmethod
    def _required_text(cls, value: Any, info: ValidationInfo) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            label = "Title" if info.field_name == "title" else "Product URL"
            raise ValueError(f"{label} is required")
        return text

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("image_urls", mode="before")
    @classmethod
    def _image_urls(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = parse_image_urls(value)
        urls = [url.strip() for url in (value or []) if isinstance(url, str) and url.strip()]
        if not urls:
            raise ValueError("At least one image URL is required")
        return urls

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value: Any) -> str:
        parse_price(value)
        return str(value).strip()

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


def _error_messages(exc: pydantic.ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        if error["type"] == "missing":
            messages.append(f"{error['loc'][0]} is required")
        else:
            messages.append(error["msg"].removeprefix("Value error, "))
    return messages


def validate_create_payload(data: Any) -> ProductCreate:
    """Validate a create payload, raising the domain ValidationError on bad input."""
    if isinstance(data, ProductCreate):
        return data
    try:
        return ProductCreate.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(_error_messages(exc)) from exc

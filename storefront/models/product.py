# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Deleting a product only flips `is_active`; every storefront read
    filters on it, so carts and history keep valid references.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        description="Long description shown on the product page",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        index=True,
        description="Current unit price",
    )

    category: str = Field(
        max_length=50,
        index=True,
        description="One of the fixed storefront categories",
    )

    brand: str | None = Field(
        default=None,
        max_length=100,
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered image URLs, first one is the hero image",
    )

    features: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    rating_average: float = Field(default=0, ge=0, le=5, index=True)
    rating_count: int = Field(default=0, ge=0)

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=_utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_serializer, field_validator
from sqlmodel import SQLModel, Field

# Fixed storefront categories.
Category = Literal[
    "electronics",
    "clothing",
    "books",
    "home",
    "sports",
    "beauty",
    "toys",
    "food",
    "other",
]

SortOrder = Literal["asc", "desc"]


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    name, description, price and category are required; the service
    reports which of them are missing.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Category | None = None
    brand: str | None = Field(default=None, max_length=100)
    stock: int = Field(default=0, ge=0)
    images: list[str] = []
    features: list[str] = []

    @field_validator("name", "description", "brand", mode="before")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return _strip_or_none(v)
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.

    Omitted fields are left untouched. Only `brand` may be sent as null
    (to clear it); every other field rejects an explicit null.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Category | None = None
    brand: str | None = Field(default=None, max_length=100)
    stock: int | None = Field(default=None, ge=0)
    images: list[str] | None = None
    features: list[str] | None = None
    rating_average: float | None = Field(default=None, ge=0, le=5)
    rating_count: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator(
        "price",
        "category",
        "stock",
        "images",
        "features",
        "rating_average",
        "rating_count",
        "is_active",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("brand")
    @classmethod
    def blank_brand_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    category: str
    brand: str | None = None
    stock: int
    images: list[str]
    features: list[str]
    rating_average: float
    rating_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("price", when_used="json")
    def price_as_number(self, v: Decimal) -> float:
        return float(v)


class ProductFilters(SQLModel):
    """
    Listing query: filters, sort and paging.

    page / limit left as None fall back to the configured defaults.
    """

    category: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    brand: str | None = None
    search: str | None = None
    in_stock: bool = False
    sort_by: str = "created_at"
    sort_order: SortOrder = "desc"
    page: int | None = None
    limit: int | None = None


class Pagination(SQLModel):
    current_page: int
    limit: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool


class ProductPage(SQLModel):
    """
    One page of products plus the pagination block.
    """

    items: list[ProductRead]
    pagination: Pagination


class CategoryList(SQLModel):
    categories: list[str]

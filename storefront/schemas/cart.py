# storefront/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import field_serializer
from sqlmodel import SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    quantity is checked by the service (must be >= 1).
    """

    product_id: uuid.UUID
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for setting the absolute quantity of a cart line.
    """

    quantity: int


class CartProductRead(SQLModel):
    """
    Current product details shown next to a cart line.
    """

    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    images: list[str]
    category: str
    stock: int
    is_active: bool

    @field_serializer("price", when_used="json")
    def price_as_number(self, v: Decimal) -> float:
        return float(v)


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including line_total.

    `price` is the snapshot taken when the line was last written;
    `product.price` is the live catalog price.
    """

    product_id: uuid.UUID
    quantity: int
    price: Decimal
    line_total: Decimal
    product: CartProductRead | None = None

    @field_serializer("price", "line_total", when_used="json")
    def money_as_number(self, v: Decimal) -> float:
        return float(v)


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    id: uuid.UUID | None = None
    items: list[CartLineRead] = []
    total_items: int = 0
    total_amount: Decimal = Decimal("0")
    updated_at: datetime | None = None

    @field_serializer("total_amount", when_used="json")
    def total_as_number(self, v: Decimal) -> float:
        return float(v)


class CartCount(SQLModel):
    count: int

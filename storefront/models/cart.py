# storefront/models/cart.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from storefront.models.product import Product


class Cart(SQLModel, table=True):
    """
    One cart per user.

    total_items / total_amount are derived from the lines and are only
    written by CartRepository.save(), together with a version bump.
    """

    __tablename__ = "carts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    total_items: int = Field(default=0, ge=0)

    total_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=12,
        decimal_places=2,
    )

    version: int = Field(
        default=1,
        description="Optimistic concurrency counter",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    lines: list["CartLine"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={
            "order_by": "CartLine.position",
            "cascade": "all, delete-orphan",
        },
    )


class CartLine(SQLModel, table=True):
    """
    A product + quantity + price snapshot inside a cart.
    One cart cannot have 2 rows for the same product.
    """

    __tablename__ = "cart_lines"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_lines_cart_product"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID = Field(
        foreign_key="carts.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Product price when the line was last written",
    )

    position: int = Field(
        default=0,
        description="Insertion order within the cart",
    )

    cart: Optional[Cart] = Relationship(back_populates="lines")
    product: Optional[Product] = Relationship()

# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from storefront.core.exceptions import CartConflictError
from storefront.models.cart import Cart, CartLine


class CartRepository:
    """
    Data access layer for carts and their lines.

    Writes to an existing cart go through save(), which only commits if
    the cart's version is still the one the caller read.
    """

    def get_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        *,
        with_products: bool = False,
    ) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        if with_products:
            stmt = stmt.options(
                selectinload(Cart.lines).selectinload(CartLine.product)
            )
        return session.exec(stmt).first()

    def create(self, session: Session, user_id: uuid.UUID) -> Cart:
        """
        Insert an empty cart.

        Raises IntegrityError if the user already has one (unique user_id).
        """
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    def save(
        self,
        session: Session,
        cart: Cart,
        *,
        expected_version: int,
        total_items: int,
        total_amount: Decimal,
    ) -> None:
        """
        Flush pending line changes and write the new totals, but only if
        nobody else bumped the version since it was read.

        Everything happens in one transaction; on a lost race it is rolled
        back and CartConflictError is raised.
        """
        cart_id = cart.id
        user_id = cart.user_id
        carts = Cart.__table__

        try:
            session.flush()
            result = session.connection().execute(
                update(carts)
                .where(
                    carts.c.id == cart_id,
                    carts.c.version == expected_version,
                )
                .values(
                    total_items=total_items,
                    total_amount=total_amount,
                    version=expected_version + 1,
                    updated_at=datetime.now(timezone.utc),
                )
            )
        except IntegrityError:
            # Another writer inserted the same product line first
            session.rollback()
            raise CartConflictError(user_id)

        if result.rowcount != 1:
            session.rollback()
            raise CartConflictError(user_id)

        session.commit()

# storefront/services/cart_service.py
import logging
import uuid
from collections.abc import Callable, Iterable
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.exceptions import (
    CartConflictError,
    InsufficientStockError,
    InvalidArgumentError,
    NotFoundError,
    StorefrontError,
)
from storefront.models.cart import Cart, CartLine
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartLineRead, CartProductRead, CartRead

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def line_total(line: CartLine) -> Decimal:
    return (Decimal(line.price) * line.quantity).quantize(CENT)


def cart_totals(lines: Iterable[CartLine]) -> tuple[int, Decimal]:
    """Return (total_items, total_amount) for the given lines."""
    total_items = 0
    total_amount = Decimal("0")
    for line in lines:
        total_items += line.quantity
        total_amount += line_total(line)
    return total_items, total_amount.quantize(CENT)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - enforce quantity >= 1 and quantity <= stock
      - merge duplicate adds into one line
      - refresh the line's price snapshot whenever it is written
      - keep totals equal to the sum over the lines

    Stock is only checked, never reserved or decremented.

    Every mutation is read-modify-write against a versioned cart row.
    If another request saved the cart in between, the mutation is re-run
    from a fresh read (up to max_attempts).
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        max_attempts: int = 3,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.max_attempts = max(1, max_attempts)

    # ---- internal helpers ----

    def _get_active_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product", product_id=product_id)
        return product

    @staticmethod
    def _find_line(cart: Cart, product_id: uuid.UUID) -> CartLine | None:
        for line in cart.lines:
            if line.product_id == product_id:
                return line
        return None

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity < 1:
            raise InvalidArgumentError(
                "Quantity must be at least 1",
                quantity=quantity,
            )

    @staticmethod
    def _check_stock(product: Product, requested: int) -> None:
        if product.stock < requested:
            raise InsufficientStockError(product.id, requested, product.stock)

    def _get_or_create_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is not None:
            return cart
        try:
            cart = self.cart_repo.create(session, user_id)
            logger.info("Created cart for user %s", user_id)
            return cart
        except IntegrityError:
            # Someone else created it first
            session.rollback()
            cart = self.cart_repo.get_for_user(session, user_id)
            if cart is None:
                raise
            return cart

    def _mutate(
        self,
        session: Session,
        user_id: uuid.UUID,
        apply: Callable[[Cart], None],
        *,
        create_missing: bool = False,
    ) -> CartRead:
        """
        Load the cart, apply `apply` to it, recompute totals and save.

        `apply` validates before touching any line; a StorefrontError
        raised from it rolls the session back and propagates.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                if create_missing:
                    cart = self._get_or_create_cart(session, user_id)
                else:
                    cart = self.cart_repo.get_for_user(session, user_id)
                    if cart is None:
                        raise NotFoundError("Cart", user_id=user_id)

                seen_version = cart.version
                apply(cart)
            except StorefrontError:
                session.rollback()
                raise

            total_items, total_amount = cart_totals(cart.lines)
            try:
                self.cart_repo.save(
                    session,
                    cart,
                    expected_version=seen_version,
                    total_items=total_items,
                    total_amount=total_amount,
                )
            except CartConflictError:
                logger.warning(
                    "Cart for user %s changed concurrently (attempt %d/%d)",
                    user_id,
                    attempt,
                    self.max_attempts,
                )
                continue

            return self.get_cart(session, user_id)

        raise CartConflictError(user_id, attempts=self.max_attempts)

    @staticmethod
    def _to_read(cart: Cart) -> CartRead:
        items: list[CartLineRead] = []
        for line in cart.lines:
            product = (
                CartProductRead.model_validate(line.product)
                if line.product is not None
                else None
            )
            items.append(
                CartLineRead(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                    line_total=line_total(line),
                    product=product,
                )
            )

        return CartRead(
            id=cart.id,
            items=items,
            total_items=cart.total_items,
            total_amount=cart.total_amount,
            updated_at=cart.updated_at,
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Return the user's cart with each line expanded with the current
        product details. A user without a cart gets an empty cart.
        """
        cart = self.cart_repo.get_for_user(session, user_id, with_products=True)
        if cart is None:
            return CartRead()
        return self._to_read(cart)

    def get_cart_count(self, session: Session, user_id: uuid.UUID) -> int:
        """Total quantity across all lines (0 without a cart)."""
        cart = self.cart_repo.get_for_user(session, user_id)
        return cart.total_items if cart else 0

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartRead:
        """
        Add a product to the user's cart.

        Rules:
          - quantity >= 1
          - product must exist and be active
          - existing_quantity + quantity <= stock
          - the line's price snapshot becomes the current product price
        """
        self._check_quantity(quantity)
        product = self._get_active_product(session, product_id)
        # Checked before the cart is lazily created
        self._check_stock(product, quantity)

        def apply(cart: Cart) -> None:
            line = self._find_line(cart, product_id)
            if line is not None:
                new_qty = line.quantity + quantity
                self._check_stock(product, new_qty)
                line.quantity = new_qty
                line.price = product.price
                return

            self._check_stock(product, quantity)
            position = max((ln.position for ln in cart.lines), default=-1) + 1
            cart.lines.append(
                CartLine(
                    product_id=product.id,
                    quantity=quantity,
                    price=product.price,
                    position=position,
                )
            )

        return self._mutate(session, user_id, apply, create_missing=True)

    def update_cart_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartRead:
        """
        Set the absolute quantity of a line and refresh its price snapshot.
        Use remove_from_cart to drop a line.
        """
        self._check_quantity(quantity)

        def apply(cart: Cart) -> None:
            line = self._find_line(cart, product_id)
            if line is None:
                raise NotFoundError("Cart item", product_id=product_id)

            product = self._get_active_product(session, product_id)
            self._check_stock(product, quantity)

            line.quantity = quantity
            line.price = product.price

        return self._mutate(session, user_id, apply)

    def remove_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartRead:
        """
        Remove a product from the cart. Removing a product that is not
        in the cart leaves it unchanged.
        """

        def apply(cart: Cart) -> None:
            line = self._find_line(cart, product_id)
            if line is not None:
                cart.lines.remove(line)

        return self._mutate(session, user_id, apply)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Remove every line and zero the totals. The cart row itself stays.
        """

        def apply(cart: Cart) -> None:
            cart.lines.clear()

        return self._mutate(session, user_id, apply)

# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartCount, CartItemCreate, CartItemUpdate, CartRead
from storefront.services.cart_service import CartService

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(
    cart_repo,
    product_repo,
    max_attempts=settings.CART_MAX_ATTEMPTS,
)


@router.get("", response_model=CartRead)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get current user's cart, lines expanded with product details.
    Users without a cart get an empty one.
    """
    return service.get_cart(session, current_user.id)


@router.get("/count", response_model=CartCount)
def get_cart_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Total quantity in the cart (badge counter).
    """
    return CartCount(count=service.get_cart_count(session, current_user.id))


@router.post("", response_model=CartRead)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    return service.add_to_cart(
        session,
        current_user.id,
        payload.product_id,
        payload.quantity,
    )


@router.patch("/{product_id}", response_model=CartRead)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a product in the cart.

    Returns the updated cart.
    """
    return service.update_cart_item(
        session=session,
        user_id=current_user.id,
        product_id=product_id,
        quantity=payload.quantity,
    )


@router.delete("/{product_id}", response_model=CartRead)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove a product from the cart.

    Returns the updated cart.
    """
    return service.remove_from_cart(session, current_user.id, product_id)


@router.delete("", response_model=CartRead)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart.

    Returns an empty cart.
    """
    return service.clear_cart(session, current_user.id)

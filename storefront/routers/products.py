# storefront/routers/products.py
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    CategoryList,
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductRead,
    ProductUpdate,
    SortOrder,
)
from storefront.services.product_service import ProductService

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(
    repo,
    default_page_size=settings.DEFAULT_PAGE_SIZE,
    max_page_size=settings.MAX_PAGE_SIZE,
)


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    brand: str | None = None,
    search: str | None = None,
    in_stock: bool = False,
    sort_by: str = "created_at",
    sort_order: SortOrder = "desc",
    page: int | None = None,
    limit: int | None = None,
):
    """
    List active products with filters, sorting and pagination.

    - Public endpoint.
    - `page` is 1-based; `limit` is capped at MAX_PAGE_SIZE.
    """
    filters = ProductFilters(
        category=category,
        min_price=min_price,
        max_price=max_price,
        brand=brand,
        search=search,
        in_stock=in_stock,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return service.list_products(session, filters)


@router.get("/categories", response_model=CategoryList)
def list_categories(session: Session = Depends(get_session)):
    """
    Distinct categories that currently have active products.
    """
    return CategoryList(categories=service.list_categories(session))


@router.get("/category/{category}", response_model=ProductPage)
def list_products_by_category(
    category: str,
    session: Session = Depends(get_session),
    page: int | None = None,
    limit: int | None = None,
):
    """
    Newest active products in one category.
    """
    return service.list_by_category(session, category, page=page, limit=limit)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single active product by id.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """
    Soft-delete a product (admin only). The row is kept, marked inactive.
    """
    service.delete_product(session, product_id)
    return {"message": "Product deleted successfully"}

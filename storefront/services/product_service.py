# storefront/services/product_service.py
import logging
import math
import uuid

from sqlmodel import Session

from storefront.core.exceptions import InvalidArgumentError, NotFoundError
from storefront.models.product import Product
from storefront.repositories.product_repo import SORT_COLUMNS, ProductRepository
from storefront.schemas.product import (
    Pagination,
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductRead,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("name", "description", "price", "category")


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - storefront listing: filters, sorting, pagination
      - hide inactive products from every public read
      - validate admin create/update payloads beyond pydantic
      - soft delete (is_active=False), rows are never removed
    """

    def __init__(
        self,
        repo: ProductRepository,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ):
        self.repo = repo
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    # ----- Helpers -----

    def _resolve_paging(self, page: int | None, limit: int | None) -> tuple[int, int]:
        page = 1 if page is None else page
        limit = self.default_page_size if limit is None else limit

        if page < 1:
            raise InvalidArgumentError("page must be >= 1", page=page)
        if limit < 1:
            raise InvalidArgumentError("limit must be >= 1", limit=limit)
        return page, min(limit, self.max_page_size)

    @staticmethod
    def _pagination(page: int, limit: int, total: int) -> Pagination:
        total_pages = math.ceil(total / limit)
        return Pagination(
            current_page=page,
            limit=limit,
            total_pages=total_pages,
            total_items=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

    def _get_any(self, session: Session, product_id: uuid.UUID) -> Product:
        """Fetch a product regardless of its active flag (admin paths)."""
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product", product_id=product_id)
        return product

    # ----- Public reads -----

    def list_products(self, session: Session, filters: ProductFilters) -> ProductPage:
        """
        One page of active products matching `filters`.

        category is an exact (lower-cased) match, brand and search are
        case-insensitive substring matches, the price range is inclusive.
        """
        if filters.sort_by not in SORT_COLUMNS:
            raise InvalidArgumentError(
                f"Cannot sort by '{filters.sort_by}'",
                allowed=sorted(SORT_COLUMNS),
            )
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise InvalidArgumentError(
                "min_price cannot be greater than max_price",
                min_price=filters.min_price,
                max_price=filters.max_price,
            )

        page, limit = self._resolve_paging(filters.page, filters.limit)

        query = dict(
            category=filters.category.strip().lower() if filters.category else None,
            min_price=filters.min_price,
            max_price=filters.max_price,
            brand=filters.brand.strip() if filters.brand else None,
            search=filters.search.strip() if filters.search else None,
            in_stock=filters.in_stock,
        )

        total = self.repo.count(session, **query)
        products = self.repo.list_page(
            session,
            sort_by=filters.sort_by,
            descending=filters.sort_order == "desc",
            offset=(page - 1) * limit,
            limit=limit,
            **query,
        )

        return ProductPage(
            items=[ProductRead.model_validate(p) for p in products],
            pagination=self._pagination(page, limit, total),
        )

    def list_by_category(
        self,
        session: Session,
        category: str,
        page: int | None = None,
        limit: int | None = None,
    ) -> ProductPage:
        """Newest active products of one category."""
        return self.list_products(
            session,
            ProductFilters(category=category, page=page, limit=limit),
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product", product_id=product_id)
        return product

    def list_categories(self, session: Session) -> list[str]:
        return self.repo.list_categories(session)

    # ----- Admin mutations -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        """
        Create a new active product.

        name, description, price and category must all be present.
        """
        missing = [f for f in REQUIRED_CREATE_FIELDS if getattr(payload, f) is None]
        if missing:
            raise InvalidArgumentError(
                "Please provide all required fields "
                "(name, description, price, category)",
                missing=missing,
            )

        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            category=payload.category,
            brand=payload.brand,
            stock=payload.stock,
            images=list(payload.images),
            features=list(payload.features),
        )
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        Only fields present in the payload are changed; an explicit null
        brand clears it.
        Works on inactive products too, so is_active=True reactivates.
        """
        product = self._get_any(session, product_id)

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)

        product = self.repo.update(session, product)
        logger.info("Updated product %s fields=%s", product_id, sorted(changes))
        return product

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Soft delete: mark the product inactive.
        """
        product = self._get_any(session, product_id)
        product.is_active = False
        self.repo.update(session, product)
        logger.info("Deactivated product %s", product_id)

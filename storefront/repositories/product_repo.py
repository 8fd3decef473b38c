# storefront/repositories/product_repo.py
import uuid
from decimal import Decimal

from sqlmodel import Session, col, func, or_, select

from storefront.models.product import Product

# Public sort keys -> columns
SORT_COLUMNS = {
    "created_at": Product.created_at,
    "price": Product.price,
    "name": Product.name,
    "stock": Product.stock,
    "rating": Product.rating_average,
}


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    @staticmethod
    def _conditions(
        *,
        category: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        brand: str | None = None,
        search: str | None = None,
        in_stock: bool = False,
    ) -> list:
        """
        Build WHERE clauses for a storefront listing.
        Inactive products are always excluded.
        """
        conds = [col(Product.is_active) == True]  # noqa: E712

        if category:
            conds.append(col(Product.category) == category)
        if min_price is not None:
            conds.append(col(Product.price) >= min_price)
        if max_price is not None:
            conds.append(col(Product.price) <= max_price)
        if brand:
            conds.append(col(Product.brand).icontains(brand, autoescape=True))
        if search:
            conds.append(
                or_(
                    col(Product.name).icontains(search, autoescape=True),
                    col(Product.description).icontains(search, autoescape=True),
                )
            )
        if in_stock:
            conds.append(col(Product.stock) > 0)
        return conds

    def list_page(
        self,
        session: Session,
        *,
        sort_by: str = "created_at",
        descending: bool = True,
        offset: int = 0,
        limit: int = 10,
        **filters,
    ) -> list[Product]:
        sort_col = col(SORT_COLUMNS[sort_by])
        primary = sort_col.desc() if descending else sort_col.asc()
        # id as tie-breaker keeps pages stable
        stmt = (
            select(Product)
            .where(*self._conditions(**filters))
            .order_by(primary, col(Product.id).asc())
            .offset(offset)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count(self, session: Session, **filters) -> int:
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(*self._conditions(**filters))
        )
        return session.exec(stmt).one()

    def list_categories(self, session: Session) -> list[str]:
        """Distinct categories among active products, alphabetically."""
        stmt = (
            select(Product.category)
            .where(col(Product.is_active) == True)  # noqa: E712
            .distinct()
            .order_by(Product.category)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

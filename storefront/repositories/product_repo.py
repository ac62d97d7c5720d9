# storefront/repositories/product_repo.py
import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_many(
        self,
        session: Session,
        product_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        """
        Resolve a batch of ids; ids with no product are simply absent
        from the returned mapping.
        """
        ids = list(set(product_ids))
        if not ids:
            return {}
        stmt = select(Product).where(Product.id.in_(ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def search(
        self,
        session: Session,
        *,
        search: str | None = None,
        category: str | None = None,
        sort_column: Any = None,
        descending: bool = True,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Product], int]:
        """
        Filtered, sorted, paginated listing.

        - search: case-insensitive substring on name
        - category: exact match

        Returns (page_rows, total_matching).
        """
        stmt = select(Product)
        count_stmt = select(func.count()).select_from(Product)

        if search:
            cond = func.lower(Product.name).contains(search.lower(), autoescape=True)
            stmt = stmt.where(cond)
            count_stmt = count_stmt.where(cond)

        if category:
            stmt = stmt.where(Product.category == category)
            count_stmt = count_stmt.where(Product.category == category)

        if sort_column is None:
            sort_column = Product.created_at
        stmt = stmt.order_by(sort_column.desc() if descending else sort_column.asc())
        stmt = stmt.offset(skip).limit(limit)

        total = session.exec(count_stmt).one()
        return session.exec(stmt).all(), total

    def list_all(self, session: Session) -> list[Product]:
        stmt = select(Product).order_by(Product.created_at.desc())
        return session.exec(stmt).all()

    def list_featured(self, session: Session, limit: int = 4) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.featured == True)  # noqa: E712
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_by_category(
        self,
        session: Session,
        category: str,
        limit: int = 6,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.category == category)
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return session.exec(stmt).all()

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

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

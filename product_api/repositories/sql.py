# product_api/repositories/sql.py
from __future__ import annotations

from typing import List

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import sessionmaker

from product_api.database import SessionLocal, session_scope
from product_api.models.product import Product
from product_api.repositories.base import NOT_FOUND, Found, Lookup, ProductRepository


class SqlProductRepository(ProductRepository):
    """
    SQLAlchemy-backed repository. Every call is its own unit of work
    (session_scope): commit on success, rollback and re-raise on error.
    Returned objects are detached but fully loaded (expire_on_commit=False).
    """

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def find_all(self) -> List[Product]:
        with session_scope(self._session_factory) as db:
            return list(db.execute(select(Product).order_by(Product.id.asc())).scalars().all())

    def find_by_id(self, product_id: int) -> Lookup[Product]:
        with session_scope(self._session_factory) as db:
            obj = db.get(Product, product_id)
            return Found(obj) if obj is not None else NOT_FOUND

    def save(self, product: Product) -> Product:
        with session_scope(self._session_factory) as db:
            if product.id is None:
                db.add(product)
            else:
                # detached instance coming back from find_by_id
                product = db.merge(product)
            db.flush()
            db.refresh(product)
            return product

    def exists_by_id(self, product_id: int) -> bool:
        with session_scope(self._session_factory) as db:
            return bool(db.scalar(select(exists().where(Product.id == product_id))))

    def delete_by_id(self, product_id: int) -> None:
        with session_scope(self._session_factory) as db:
            db.execute(delete(Product).where(Product.id == product_id))

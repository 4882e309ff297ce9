# product_api/repositories/memory.py
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from product_api.models.product import Product
from product_api.repositories.base import NOT_FOUND, Found, Lookup, ProductRepository


def _detached_copy(product: Product) -> Product:
    """Copy mapped columns and any plain attributes, skipping ORM bookkeeping."""
    clone = Product()
    for key, value in vars(product).items():
        if not key.startswith("_sa_"):
            setattr(clone, key, value)
    return clone


class InMemoryProductRepository(ProductRepository):
    """
    Dict-backed store; ids come from a counter starting at 1.
    Stored records are never handed out: reads and writes go through copies,
    so a change only lands when `save` is called.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None) -> None:
        self._store: Dict[int, Product] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        for p in products or []:
            self.save(p)

    def find_all(self) -> List[Product]:
        with self._lock:
            return [_detached_copy(self._store[k]) for k in sorted(self._store)]

    def find_by_id(self, product_id: int) -> Lookup[Product]:
        with self._lock:
            obj = self._store.get(product_id)
            if obj is None:
                return NOT_FOUND
            return Found(_detached_copy(obj))

    def save(self, product: Product) -> Product:
        stored = _detached_copy(product)
        with self._lock:
            if stored.id is None:
                stored.id = self._next_id
                self._next_id += 1
            else:
                self._next_id = max(self._next_id, stored.id + 1)
            self._store[stored.id] = stored
            return _detached_copy(stored)

    def exists_by_id(self, product_id: int) -> bool:
        with self._lock:
            return product_id in self._store

    def delete_by_id(self, product_id: int) -> None:
        with self._lock:
            self._store.pop(product_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

"""Repository contract consumed by the product endpoints.

Lookups never return ``None``: they return either ``Found(value)`` or the
``NOT_FOUND`` sentinel, so every call site has to handle absence explicitly.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar, Union

from product_api.models.product import Product

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


NOT_FOUND = NotFound()

Lookup = Union[Found[T], NotFound]


class ProductRepository(ABC):

    @abstractmethod
    def find_all(self) -> Sequence[Product]:
        """Return every stored product, in repository order."""

    @abstractmethod
    def find_by_id(self, product_id: int) -> Lookup[Product]:
        """Return ``Found(product)`` or ``NOT_FOUND``."""

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Insert (no id yet) or update (id set); return the stored record."""

    @abstractmethod
    def exists_by_id(self, product_id: int) -> bool:
        """Return True when a product with this id is stored."""

    @abstractmethod
    def delete_by_id(self, product_id: int) -> None:
        """Remove the product with this id. Missing ids are a no-op."""

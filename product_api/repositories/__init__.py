from product_api.repositories.base import NOT_FOUND, Found, Lookup, NotFound, ProductRepository
from product_api.repositories.memory import InMemoryProductRepository
from product_api.repositories.sql import SqlProductRepository

__all__ = [
    "NOT_FOUND",
    "Found",
    "Lookup",
    "NotFound",
    "ProductRepository",
    "InMemoryProductRepository",
    "SqlProductRepository",
]

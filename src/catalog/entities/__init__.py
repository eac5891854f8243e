"""Catalog entities.

Each entity has its own package holding the domain model, the table model and
the repository, so everything about one business concept lives together.
"""

from .product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]

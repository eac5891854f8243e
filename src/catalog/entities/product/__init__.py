"""Entity package: Product.

- entity.py: request/response models and field constraints
- table.py: database persistence model
- repository.py: data access layer
"""

from .entity import PRODUCT_ID_MAX, Product, ProductCreate, ProductUpdate
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "PRODUCT_ID_MAX",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]

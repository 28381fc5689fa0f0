# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import ProductDAO

__all__ = [
    "BaseDAO",
    "ProductDAO",
]

from .product import Product, ProductRead

__all__ = ["Product", "ProductRead"]

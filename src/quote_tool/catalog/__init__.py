"""Catalog subpackage - product creation and in-memory storage."""
from .product_factory import ProductFactory
from .product_repository import ProductRepository

__all__ = ['ProductFactory', 'ProductRepository']

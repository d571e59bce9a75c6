"""
Product Repository - in-memory product store.

Optionally seeded from a catalog CSV at startup. Nothing is written back
to disk; the store lives for the lifetime of the process.
"""
import logging
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..engine.models import Product, ProductType
from ..errors import ProductNotFoundError, ValidationError
from .product_factory import ProductFactory

logger = logging.getLogger(__name__)


class ProductRepository:
    """Products keyed by id, in insertion order."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: dict[str, Product] = {}
        for product in products:
            self.add(product)

    @classmethod
    def from_csv(cls, path: Path, factory: Optional[ProductFactory] = None) -> 'ProductRepository':
        """
        Load a catalog CSV.

        Every row must build a valid product; the first bad row raises
        ValidationError with its line number.
        """
        factory = factory or ProductFactory()
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Product catalog not found at {path}")

        df = pd.read_csv(path, dtype=str).fillna('')
        df.columns = [c.strip() for c in df.columns]

        repository = cls()
        for line_num, row in enumerate(df.to_dict(orient='records'), start=2):
            try:
                repository.add(factory.create(row))
            except ValidationError as e:
                raise ValidationError(
                    f"{path.name} line {line_num}: {e.message}",
                    {**e.details, "line": line_num},
                ) from e

        logger.info("Loaded %d products from %s", len(repository), path)
        return repository

    def add(self, product: Product) -> Product:
        if product.id in self:
            raise ValidationError(
                f"Product with ID '{product.id}' already exists",
                {"product_id": product.id},
            )
        self._products[product.id] = product
        return product

    def get(self, product_id: str) -> Product:
        try:
            return self._products[str(product_id).strip()]
        except KeyError:
            raise ProductNotFoundError(str(product_id)) from None

    def remove(self, product_id: str) -> Product:
        product = self.get(product_id)
        del self._products[product.id]
        return product

    def list_products(self) -> list[Product]:
        return list(self._products.values())

    def list_by_type(self, product_type: ProductType) -> list[Product]:
        return [p for p in self._products.values() if p.product_type == product_type]

    def __len__(self):
        return len(self._products)

    def __contains__(self, product_id) -> bool:
        return product_id in self._products

"""
Product store implementation.

Keeps products in process memory, keyed by an auto-incrementing integer
id. Contents live as long as the owning store object: the application's
container in production, a single test in the test suite.
"""

import logging
import threading
from decimal import Decimal
from typing import Dict, Optional

from pydantic import ValidationError

from .models import Product
from ...shared.exceptions import StoreError

logger = logging.getLogger(__name__)


class InMemoryProductStore:
    """Repository for product data access operations"""

    def __init__(self):
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        # Guards both the mapping and the id sequence
        self._lock = threading.Lock()

    def add(self, name: str, price: Decimal) -> Product:
        """
        Assign the next id, store the product and return it.

        Raises:
            StoreError: If the values cannot form a product record. The id
                sequence does not advance.
        """
        with self._lock:
            try:
                product = Product(id=self._next_id, name=name, price=price)
            except ValidationError as e:
                raise StoreError(
                    f"Cannot store product: {e.error_count()} invalid field(s)",
                    operation="add"
                ) from e
            self._products[product.id] = product
            self._next_id += 1

        logger.debug(f"Stored product {product.id}: {product.name}")
        return product

    def get(self, product_id: int) -> Optional[Product]:
        """Product with the given id, or None."""
        with self._lock:
            return self._products.get(product_id)

    def count(self) -> int:
        with self._lock:
            return len(self._products)

    def clear(self) -> None:
        """Drop every product and restart the id sequence at 1."""
        with self._lock:
            self._products.clear()
            self._next_id = 1
        logger.info("Product store cleared")

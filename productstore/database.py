# productstore/database.py
import threading
from typing import Any, Dict, List, Optional

from .core import Ok, Result, _make_product, not_found, parse_int, validate_product_payload
from .log import get_logger
from .models import Product, ProductPage

# This file holds the in-memory product collection and its lock.

logger = get_logger("store")

SEED_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Samsung",
        "description": "Smartphone",
        "price": 50000,
        "category": "Nangos",
        "inStock": True,
    },
    {
        "id": 2,
        "name": "Gen Zee Chronicles",
        "description": "Literature",
        "price": 5000,
        "category": "Kioo Cha Jamii",
        "inStock": True,
    },
    {
        "id": 3,
        "name": "Ndula",
        "description": "Simbaland",
        "price": 1000,
        "category": "Footwear",
        "inStock": False,
    },
]


class ProductStore:
    """
    Owns the product collection. Every operation returns an Ok or Err
    result; products handed out are copies, never the stored objects.
    """

    def __init__(self, seed: bool = True):
        self._lock = threading.Lock()
        self._products: List[Product] = []
        self._next_id = 1
        self.reset(seed=seed)

    def __len__(self) -> int:
        return len(self._products)

    def reset(self, seed: bool = True) -> None:
        with self._lock:
            self._products = [Product.model_validate(p) for p in SEED_PRODUCTS] if seed else []
            self._next_id = max((p.id for p in self._products), default=0) + 1

    def _find_index(self, product_id: Any) -> Optional[int]:
        pid = parse_int(product_id)
        if pid is None:
            return None
        for i, p in enumerate(self._products):
            if p.id == pid:
                return i
        return None

    # Queries
    def list_products(self, category: Optional[str] = None, page: Any = None,
                      limit: Any = None) -> "Result[ProductPage]":
        with self._lock:
            result = list(self._products)
        if category:
            wanted = category.lower()
            result = [p for p in result if p.category.lower() == wanted]

        # zero falls back to the default, same as a missing value
        page_n = parse_int(page) or 1
        limit_n = parse_int(limit) or len(result)
        start = (page_n - 1) * limit_n
        end = start + limit_n
        return Ok(ProductPage(
            page=page_n,
            limit=limit_n,
            total=len(result),
            data=[p.model_copy() for p in result[start:end]],
        ))

    def get_product(self, product_id: Any) -> "Result[Product]":
        with self._lock:
            idx = self._find_index(product_id)
            if idx is None:
                return not_found()
            return Ok(self._products[idx].model_copy())

    def search_products(self, name: Optional[str] = None) -> "Result[List[Product]]":
        term = (name or "").lower()
        with self._lock:
            matches = [p.model_copy() for p in self._products if term in p.name.lower()]
        return Ok(matches)

    def category_stats(self) -> "Result[Dict[str, int]]":
        stats: Dict[str, int] = {}
        with self._lock:
            for p in self._products:
                stats[p.category] = stats.get(p.category, 0) + 1
        return Ok(stats)

    # Mutations
    def create_product(self, payload: Any) -> "Result[Product]":
        checked = validate_product_payload(payload)
        if not checked.ok:
            return checked
        with self._lock:
            product = _make_product(self._next_id, checked.value)
            self._next_id += 1
            self._products.append(product)
        logger.debug("created product %s", product.id)
        return Ok(product.model_copy())

    def update_product(self, product_id: Any, payload: Any) -> "Result[Product]":
        checked = validate_product_payload(payload)
        if not checked.ok:
            return checked
        fields = checked.value
        with self._lock:
            idx = self._find_index(product_id)
            if idx is None:
                return not_found()
            product = self._products[idx]
            product.name = fields.name
            product.description = fields.description
            product.price = fields.price
            product.category = fields.category
            product.in_stock = fields.in_stock
            updated = product.model_copy()
        logger.debug("updated product %s", updated.id)
        return Ok(updated)

    def delete_product(self, product_id: Any) -> "Result[Product]":
        with self._lock:
            idx = self._find_index(product_id)
            if idx is None:
                return not_found()
            removed = self._products.pop(idx)
        logger.debug("deleted product %s", removed.id)
        return Ok(removed)


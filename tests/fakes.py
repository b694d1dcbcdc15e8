"""In-memory fake repository for testing.

Implements the same interface as MongoProductRepository but keeps products
in a dict. Stored products are copied on the way in and out so callers
never share state with the store, just like a real database.
"""

from typing import Dict, List, Optional, Tuple

from repository import ProductRepository
from schemas import Product, Variant


class FakeProductRepository(ProductRepository):

    def __init__(self, products: Optional[List[Product]] = None) -> None:
        self._store: Dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p.model_copy(deep=True)

    def insert(self, product: Product) -> None:
        self._store[product.id] = product.model_copy(deep=True)

    def list_all(self) -> List[Product]:
        products = sorted(reversed(list(self._store.values())), key=lambda p: p.created_at, reverse=True)
        return [p.model_copy(deep=True) for p in products]

    def get_by_id(self, product_id: str) -> Optional[Product]:
        p = self._store.get(product_id.lower())
        return p.model_copy(deep=True) if p else None

    def find_by_category(self, category: str) -> List[Product]:
        return self._filter(lambda p: p.category == category)

    def find_by_color(self, color: str) -> List[Product]:
        return self._filter(lambda p: any(v.color == color for v in p.variants))

    def find_by_min_stock(self, threshold: int) -> List[Product]:
        return self._filter(lambda p: any(v.stock > threshold for v in p.variants))

    def get_variants(self, product_id: str) -> Optional[Tuple[str, List[Variant]]]:
        p = self.get_by_id(product_id)
        return (p.name, p.variants) if p else None

    def save(self, product: Product) -> bool:
        if product.id not in self._store:
            return False
        self._store[product.id] = product.model_copy(deep=True)
        return True

    def delete(self, product_id: str) -> bool:
        return self._store.pop(product_id.lower(), None) is not None

    def delete_all(self) -> int:
        count = len(self._store)
        self._store.clear()
        return count

    def _filter(self, predicate) -> List[Product]:
        return [p.model_copy(deep=True) for p in self._store.values() if predicate(p)]

"""Product persistence.

ProductRepository is the interface the catalog depends on. The MongoDB
implementation stores each product as one document with its variants
embedded, addressed by ObjectId.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

from database import doc_to_product, doc_to_variant, parse_object_id, product_to_doc
from schemas import Product, Variant

logger = logging.getLogger(__name__)


class ProductRepository(ABC):

    @abstractmethod
    def insert(self, product: Product) -> None:
        """Persist a new product."""

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Return every product, most recently created first."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def find_by_category(self, category: str) -> List[Product]:
        """Return products whose category equals ``category`` exactly."""

    @abstractmethod
    def find_by_color(self, color: str) -> List[Product]:
        """Return products having at least one variant of ``color``."""

    @abstractmethod
    def find_by_min_stock(self, threshold: int) -> List[Product]:
        """Return products having at least one variant with stock above ``threshold``."""

    @abstractmethod
    def get_variants(self, product_id: str) -> Optional[Tuple[str, List[Variant]]]:
        """Return (name, variants) of a product, or None if not found."""

    @abstractmethod
    def save(self, product: Product) -> bool:
        """Replace a stored product. False if it no longer exists."""

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product. False if it did not exist."""

    @abstractmethod
    def delete_all(self) -> int:
        """Remove every product and return how many were removed."""


class MongoProductRepository(ProductRepository):

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def ensure_indexes(self) -> None:
        self._collection.create_index([("category", ASCENDING)])
        self._collection.create_index([("price", ASCENDING)])

    # --- ProductRepository interface ------------------------------------------

    def insert(self, product: Product) -> None:
        self._collection.insert_one(product_to_doc(product))

    def list_all(self) -> List[Product]:
        return self._find({}, sort=[("createdAt", DESCENDING)])

    def get_by_id(self, product_id: str) -> Optional[Product]:
        doc = self._collection.find_one({"_id": parse_object_id(product_id)})
        return doc_to_product(doc) if doc else None

    def find_by_category(self, category: str) -> List[Product]:
        return self._find({"category": category})

    def find_by_color(self, color: str) -> List[Product]:
        return self._find({"variants.color": color})

    def find_by_min_stock(self, threshold: int) -> List[Product]:
        return self._find({"variants.stock": {"$gt": threshold}})

    def get_variants(self, product_id: str) -> Optional[Tuple[str, List[Variant]]]:
        doc = self._collection.find_one(
            {"_id": parse_object_id(product_id)}, {"name": 1, "variants": 1}
        )
        if not doc:
            return None
        return doc["name"], [doc_to_variant(v) for v in doc.get("variants", [])]

    def save(self, product: Product) -> bool:
        doc = product_to_doc(product)
        result = self._collection.replace_one({"_id": doc["_id"]}, doc)
        return result.matched_count == 1

    def delete(self, product_id: str) -> bool:
        result = self._collection.delete_one({"_id": parse_object_id(product_id)})
        return result.deleted_count == 1

    def delete_all(self) -> int:
        return self._collection.delete_many({}).deleted_count

    # --- Helpers --------------------------------------------------------------

    def _find(self, query, sort=None) -> List[Product]:
        cursor = self._collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        return [doc_to_product(d) for d in cursor]

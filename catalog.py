"""Catalog use cases.

Each method validates its input, talks to the repository, and returns
entities. Failures are raised as errors.CatalogError subclasses.
"""

import logging
from typing import Any, List, Tuple

from database import new_object_id, parse_object_id
from errors import NotFoundError, ValidationError
from repository import ProductRepository
from schemas import (
    Product,
    ProductIn,
    Variant,
    VariantIn,
    merge_product_update,
    missing_fields,
    utcnow,
    validate_product,
    validate_stock,
    validate_variant,
)

logger = logging.getLogger(__name__)


def _build_variant(data: VariantIn) -> Variant:
    return Variant(id=data.id or new_object_id(), color=data.color, size=data.size, stock=data.stock)


class ProductCatalog:

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    # --- Reads ----------------------------------------------------------------

    def list_all(self) -> List[Product]:
        return self._repository.list_all()

    def get(self, product_id: str) -> Product:
        parse_object_id(product_id)
        product = self._repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def by_category(self, category: str) -> List[Product]:
        return self._repository.find_by_category(category)

    def by_color(self, color: str) -> List[Product]:
        return self._repository.find_by_color(color)

    def by_min_stock(self, threshold: int) -> List[Product]:
        return self._repository.find_by_min_stock(threshold)

    def variants(self, product_id: str) -> Tuple[str, List[Variant]]:
        parse_object_id(product_id)
        projection = self._repository.get_variants(product_id)
        if projection is None:
            raise NotFoundError("Product not found")
        return projection

    # --- Writes ---------------------------------------------------------------

    def create(self, payload: Any) -> Product:
        missing = missing_fields(payload)
        if missing:
            raise ValidationError(
                missing,
                message="Please provide name, price, category, and variants",
            )
        product = self._new_product(validate_product(payload))
        self._repository.insert(product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def update(self, product_id: str, payload: Any) -> Product:
        current = self.get(product_id)
        data = merge_product_update(current, payload)
        current.name = data.name
        current.price = data.price
        current.category = data.category
        current.variants = [_build_variant(v) for v in data.variants]
        self._save(current)
        logger.info("Updated product %s", product_id)
        return current

    def delete(self, product_id: str) -> None:
        parse_object_id(product_id)
        if not self._repository.delete(product_id):
            raise NotFoundError("Product not found")
        logger.info("Deleted product %s", product_id)

    def add_variant(self, product_id: str, payload: Any) -> Product:
        product = self.get(product_id)
        data = validate_variant(payload)
        variant = Variant(id=new_object_id(), color=data.color, size=data.size, stock=data.stock)
        product.variants.append(variant)
        self._save(product)
        logger.info("Added variant %s to product %s", variant.id, product_id)
        return product

    def update_variant_stock(self, product_id: str, variant_id: str, payload: Any) -> Product:
        product = self.get(product_id)
        variant = product.variant(str(parse_object_id(variant_id, kind="variant")))
        if variant is None:
            raise NotFoundError("Variant not found")
        variant.stock = validate_stock(payload)
        self._save(product)
        logger.info("Set stock of variant %s on product %s to %d", variant_id, product_id, variant.stock)
        return product

    # --- Helpers --------------------------------------------------------------

    def _new_product(self, data: ProductIn) -> Product:
        now = utcnow()
        return Product(
            id=new_object_id(),
            name=data.name,
            price=data.price,
            category=data.category,
            variants=[_build_variant(v) for v in data.variants],
            created_at=now,
            updated_at=now,
        )

    def _save(self, product: Product) -> None:
        # whole document is re-validated before it is written back
        validate_product(product.model_dump(include={"name", "price", "category", "variants"}))
        product.touch()
        if not self._repository.save(product):
            raise NotFoundError("Product not found")

"""Reset the product collection to the sample catalog and run a few example queries."""

import logging
import sys

from catalog import ProductCatalog
from config import configure_logging, get_settings
from database import connect, get_collection
from repository import MongoProductRepository

logger = logging.getLogger("seed")

SAMPLE_PRODUCTS = [
    {
        "name": "Running Shoes",
        "price": 120,
        "category": "Footwear",
        "variants": [
            {"color": "Red", "size": "M", "stock": 10},
            {"color": "Blue", "size": "L", "stock": 5},
            {"color": "Black", "size": "S", "stock": 8},
        ],
    },
    {
        "name": "Smartphone",
        "price": 699,
        "category": "Electronics",
        "variants": [
            {"color": "Black", "size": "128GB", "stock": 15},
            {"color": "White", "size": "256GB", "stock": 10},
            {"color": "Blue", "size": "128GB", "stock": 12},
        ],
    },
    {
        "name": "Winter Jacket",
        "price": 200,
        "category": "Apparel",
        "variants": [
            {"color": "Black", "size": "M", "stock": 8},
            {"color": "Gray", "size": "L", "stock": 12},
            {"color": "Navy", "size": "XL", "stock": 6},
        ],
    },
    {
        "name": "Laptop Backpack",
        "price": 45,
        "category": "Accessories",
        "variants": [
            {"color": "Black", "size": "Standard", "stock": 20},
            {"color": "Gray", "size": "Standard", "stock": 15},
        ],
    },
    {
        "name": "Wireless Headphones",
        "price": 150,
        "category": "Electronics",
        "variants": [
            {"color": "Black", "size": "One Size", "stock": 25},
            {"color": "White", "size": "One Size", "stock": 18},
            {"color": "Red", "size": "One Size", "stock": 10},
        ],
    },
    {
        "name": "Yoga Mat",
        "price": 35,
        "category": "Sports",
        "variants": [
            {"color": "Purple", "size": "Standard", "stock": 30},
            {"color": "Blue", "size": "Standard", "stock": 25},
            {"color": "Pink", "size": "Standard", "stock": 20},
        ],
    },
    {
        "name": "T-Shirt",
        "price": 25,
        "category": "Apparel",
        "variants": [
            {"color": "White", "size": "S", "stock": 50},
            {"color": "White", "size": "M", "stock": 40},
            {"color": "White", "size": "L", "stock": 30},
            {"color": "Black", "size": "S", "stock": 45},
            {"color": "Black", "size": "M", "stock": 35},
            {"color": "Black", "size": "L", "stock": 25},
        ],
    },
    {
        "name": "Smart Watch",
        "price": 299,
        "category": "Electronics",
        "variants": [
            {"color": "Silver", "size": "42mm", "stock": 12},
            {"color": "Black", "size": "42mm", "stock": 15},
            {"color": "Gold", "size": "46mm", "stock": 8},
        ],
    },
]


def seed(catalog: ProductCatalog, repository) -> list:
    removed = repository.delete_all()
    logger.info("Removed %d existing products", removed)

    products = [catalog.create(p) for p in SAMPLE_PRODUCTS]
    logger.info("%d products inserted", len(products))
    for p in products:
        logger.info(
            "%s | %s | $%s | %d variants | total stock %d",
            p.name, p.category, p.price, len(p.variants), p.total_stock,
        )
    return products


def report(catalog: ProductCatalog) -> dict:
    name, variants = catalog.variants(
        next(p.id for p in catalog.list_all() if p.name == "Running Shoes")
    )
    results = {
        "electronics": len(catalog.by_category("Electronics")),
        "blue": len(catalog.by_color("Blue")),
        "running_shoes_variants": len(variants),
        "stock_above_10": len(catalog.by_min_stock(10)),
    }
    logger.info("Electronics products: %d", results["electronics"])
    logger.info("Products with Blue variants: %d", results["blue"])
    logger.info("%s has %d variants", name, results["running_shoes_variants"])
    logger.info("Products with variants having stock > 10: %d", results["stock_above_10"])
    return results


def main() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    client = connect(settings)
    try:
        repository = MongoProductRepository(get_collection(client, settings))
        repository.ensure_indexes()
        catalog = ProductCatalog(repository)
        seed(catalog, repository)
        report(catalog)
    except Exception:
        logger.exception("Error seeding database")
        return 1
    finally:
        client.close()
    logger.info("Database seeded successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())

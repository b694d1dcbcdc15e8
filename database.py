"""
MongoDB access helpers.

The client is built explicitly from Settings and handed to the repository;
nothing in this module holds a connection at import time.
"""

import logging
from typing import Any, Dict

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection

from config import Settings
from errors import InvalidIdError
from schemas import Product, Variant

logger = logging.getLogger(__name__)


def connect(settings: Settings) -> MongoClient:
    logger.info("Connecting to MongoDB database %s", settings.DATABASE_NAME)
    return MongoClient(settings.DATABASE_URL, tz_aware=True)


def get_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.DATABASE_NAME][settings.COLLECTION_NAME]


def new_object_id() -> str:
    return str(ObjectId())


def parse_object_id(value: str, kind: str = "product") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdError(f"Invalid {kind} id")


# ---------- Conversion ----------

def doc_to_dict(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in doc.items():
        if isinstance(v, ObjectId):
            out[k] = str(v)
        elif isinstance(v, list):
            out[k] = [doc_to_dict(i) if isinstance(i, dict) else i for i in v]
        else:
            out[k] = v
    if "_id" in out:
        out["id"] = out.pop("_id")
    return out


def doc_to_product(doc: Dict[str, Any]) -> Product:
    return Product.model_validate(doc_to_dict(doc))


def doc_to_variant(doc: Dict[str, Any]) -> Variant:
    return Variant.model_validate(doc_to_dict(doc))


def product_to_doc(product: Product) -> Dict[str, Any]:
    return {
        "_id": ObjectId(product.id),
        "name": product.name,
        "price": product.price,
        "category": product.category,
        "variants": [
            {"_id": ObjectId(v.id), "color": v.color, "size": v.size, "stock": v.stock}
            for v in product.variants
        ],
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
    }

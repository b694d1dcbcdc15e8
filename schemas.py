"""
Catalog Schemas

Pydantic models for the "product" collection and the variants nested in it,
plus the validation step that turns a raw request payload into a checked
input model (or a ValidationError listing every violation).

Validation here never touches the database.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from errors import ValidationError

CATEGORIES = (
    "Electronics",
    "Apparel",
    "Footwear",
    "Accessories",
    "Home & Garden",
    "Sports",
    "Books",
    "Toys",
)

REQUIRED_FIELDS = ("name", "price", "category", "variants")

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Inputs ----------

class VariantIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        None,
        pattern=OBJECT_ID_PATTERN,
        validation_alias=AliasChoices("id", "_id"),
        description="Kept when replacing variants of an existing product",
    )
    color: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    stock: int = Field(0, ge=0)

    @field_validator("id")
    @classmethod
    def normalise_id(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class ProductIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., ge=0)
    category: str
    variants: List[VariantIn]

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str) -> str:
        if value not in CATEGORIES:
            raise PydanticCustomError(
                "category_enum", "{value} is not a valid category", {"value": value}
            )
        return value

    @field_validator("variants")
    @classmethod
    def check_variants(cls, value: List[VariantIn]) -> List[VariantIn]:
        if not value:
            raise PydanticCustomError(
                "variants_empty", "Product must have at least one variant"
            )
        ids = [v.id for v in value if v.id]
        if len(ids) != len(set(ids)):
            raise PydanticCustomError("variants_duplicate_id", "Variant ids must be unique")
        return value


class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0)


# ---------- Stored entities ----------

class Variant(BaseModel):
    id: str
    color: str
    size: str
    stock: int = 0


class Product(BaseModel):
    """A catalog product with its variants.

    Identifiers are ObjectId hex strings; conversion to and from BSON happens
    in the database layer.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: float
    category: str
    variants: List[Variant]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @computed_field(alias="totalStock")
    @property
    def total_stock(self) -> int:
        return sum(v.stock for v in self.variants)

    @computed_field(alias="availableColors")
    @property
    def available_colors(self) -> List[str]:
        return list(dict.fromkeys(v.color for v in self.variants))

    @computed_field(alias="availableSizes")
    @property
    def available_sizes(self) -> List[str]:
        return list(dict.fromkeys(v.size for v in self.variants))

    def variant(self, variant_id: str) -> Optional[Variant]:
        """Look up a variant by identifier, None if this product has no such variant."""
        for v in self.variants:
            if v.id == variant_id:
                return v
        return None

    def touch(self) -> None:
        self.updated_at = utcnow()

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ---------- Validation ----------

_REQUIRED = {
    "name": "Product name is required",
    "price": "Price is required",
    "category": "Category is required",
    "variants": "Product must have at least one variant",
    "color": "Color is required",
    "size": "Size is required",
    "stock": "Stock quantity is required",
}

_MESSAGES = {
    ("name", "string_too_short"): "Product name must be at least 2 characters",
    ("name", "string_too_long"): "Product name cannot exceed 100 characters",
    ("price", "greater_than_equal"): "Price cannot be negative",
    ("price", "float_parsing"): "Price must be a number",
    ("price", "float_type"): "Price must be a number",
    ("variants", "list_type"): "Variants must be a list",
    ("color", "string_too_short"): "Color is required",
    ("size", "string_too_short"): "Size is required",
    ("stock", "greater_than_equal"): "Stock cannot be negative",
    ("stock", "int_parsing"): "Stock must be an integer",
    ("stock", "int_from_float"): "Stock must be an integer",
    ("stock", "int_type"): "Stock must be an integer",
    ("id", "string_pattern_mismatch"): "Variant id must be a 24 character hex string",
}


def _describe(error: Dict[str, Any]) -> str:
    loc = error["loc"]
    if not loc:
        return "Request body must be a JSON object"
    names = [part for part in loc if isinstance(part, str)]
    field = names[-1] if names else ""
    if error["type"] == "model_type":
        message = "Value must be an object"
    elif error["type"] == "missing" or (error.get("input") is None and field in _REQUIRED):
        message = _REQUIRED.get(field, error["msg"])
    else:
        message = _MESSAGES.get((field, error["type"]), error["msg"])
    if len(loc) > 1:
        return "{}: {}".format(".".join(str(part) for part in loc), message)
    return message


def violations(exc: PydanticValidationError) -> List[str]:
    return [_describe(e) for e in exc.errors()]


def validate_product(payload: Any) -> ProductIn:
    """Check a full product payload.

    Returns the validated input model; raises ValidationError carrying one
    message per violated rule.
    """
    try:
        return ProductIn.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(violations(exc)) from exc


def validate_variant(payload: Any) -> VariantIn:
    try:
        return VariantIn.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(violations(exc)) from exc


def validate_stock(payload: Any) -> int:
    try:
        return StockUpdate.model_validate(payload).stock
    except PydanticValidationError as exc:
        raise ValidationError(violations(exc)) from exc


def missing_fields(payload: Any) -> List[str]:
    if not isinstance(payload, dict):
        return list(REQUIRED_FIELDS)
    return [f for f in REQUIRED_FIELDS if payload.get(f) is None]


def merge_product_update(current: Product, payload: Any) -> ProductIn:
    """Overlay the fields present in ``payload`` on ``current`` and re-validate.

    Fields absent from the payload keep their stored values.
    """
    if not isinstance(payload, dict):
        raise ValidationError(["Request body must be a JSON object"])
    merged: Dict[str, Any] = {
        "name": current.name,
        "price": current.price,
        "category": current.category,
        "variants": [v.model_dump() for v in current.variants],
    }
    merged.update({k: payload[k] for k in REQUIRED_FIELDS if k in payload})
    return validate_product(merged)

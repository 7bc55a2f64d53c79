# product_api/validation.py
"""
Request validation for product payloads and path identifiers.

Every check here runs before the store is called; failures are raised as
BadRequest subclasses and rendered as 400 responses.
"""
import math
from typing import Any, Dict, Optional

from bson import ObjectId

from product_api.errors import InvalidIdentifier, InvalidType, MissingField
from product_api.models import NewProduct, Price, ProductChanges, PRODUCT_FIELDS

# BSON integers are signed 64-bit
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def to_number(value: Any) -> Optional[Price]:
    """
    Coerce a JSON value to a finite number, or return None.

    ints that fit in 64 bits and finite floats pass through unchanged,
    larger ints become floats. Numeric strings are parsed, integral values
    come back as int when they fit. Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return value
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        if number.is_integer() and INT64_MIN <= number <= INT64_MAX:
            return int(number)
        return number
    return None


def _price(value: Any) -> Price:
    number = to_number(value)
    if number is None:
        raise InvalidType("price must be a number")
    if number < 0:
        raise InvalidType("price must be a non-negative number")
    return number


def _text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidType(f"{field} must be a string")
    if not value.strip():
        raise MissingField(f"{field} must not be empty")
    return value


def validate_product_id(product_id: str) -> str:
    """Return the id in canonical (lower-case hex) form."""
    if not ObjectId.is_valid(product_id):
        raise InvalidIdentifier("Invalid id")
    return str(ObjectId(product_id))


def validate_new_product(payload: Optional[Dict[str, Any]]) -> NewProduct:
    payload = payload or {}
    name = payload.get("name")
    price = payload.get("price")
    category = payload.get("category")

    if not name or price is None or not category:
        raise MissingField("Missing required fields: name, price, category")

    return NewProduct(
        name=_text("name", name),
        price=_price(price),
        category=_text("category", category),
    )


def validate_product_changes(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate a partial update. Only the fields present (and not null) in the
    payload end up in the returned update set.
    """
    payload = payload or {}
    supplied = {f: payload[f] for f in PRODUCT_FIELDS if payload.get(f) is not None}
    if not supplied:
        raise MissingField("Provide at least one field: name, price, category")

    changes = ProductChanges(
        name=_text("name", supplied["name"]) if "name" in supplied else None,
        price=_price(supplied["price"]) if "price" in supplied else None,
        category=_text("category", supplied["category"]) if "category" in supplied else None,
    )
    return changes.as_update()

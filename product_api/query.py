# product_api/query.py
"""
Translation of list query parameters into a ProductQuery.

A ProductQuery is store neutral: MongoProductStore asks it for Mongo
directives, MemoryProductStore evaluates it directly.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING

from product_api.errors import InvalidParameter
from product_api.models import ID_FIELD, Price
from product_api.validation import to_number

SORT_OPTIONS = {"price": ASCENDING, "-price": DESCENDING}


@dataclass(frozen=True)
class ProductQuery:
    category: Optional[str] = None
    min_price: Optional[Price] = None
    sort_direction: Optional[int] = None
    fields: Optional[Tuple[str, ...]] = None

    # ---------------------------
    # Mongo directives
    # ---------------------------
    def mongo_filter(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {}
        if self.category is not None:
            spec["category"] = self.category
        if self.min_price is not None:
            spec["price"] = {"$gte": self.min_price}
        return spec

    def mongo_sort(self) -> Optional[List[Tuple[str, int]]]:
        if self.sort_direction is None:
            return None
        return [("price", self.sort_direction)]

    def mongo_projection(self) -> Optional[Dict[str, int]]:
        if self.fields is None:
            return None
        projection = {_store_field(f): 1 for f in self.fields}
        # Mongo returns _id unless told otherwise
        projection.setdefault("_id", 0)
        return projection

    # ---------------------------
    # In-memory evaluation
    # ---------------------------
    def matches(self, product: Dict[str, Any]) -> bool:
        if self.category is not None and product.get("category") != self.category:
            return False
        if self.min_price is not None:
            price = product.get("price")
            if price is None or price < self.min_price:
                return False
        return True

    def project(self, product: Dict[str, Any]) -> Dict[str, Any]:
        if self.fields is None:
            return dict(product)
        wanted = {_public_field(f) for f in self.fields}
        return {k: v for k, v in product.items() if k in wanted}


def _store_field(name: str) -> str:
    return "_id" if name in (ID_FIELD, "_id") else name


def _public_field(name: str) -> str:
    return ID_FIELD if name in (ID_FIELD, "_id") else name


def parse_fields(raw: str) -> Tuple[str, ...]:
    names = [s.strip() for s in raw.split(",")]
    # keep first-seen order, drop blanks and repeats
    return tuple(dict.fromkeys(n for n in names if n))


def parse_product_query(
    category: Optional[str] = None,
    min_price: Optional[str] = None,
    sort: Optional[str] = None,
    fields: Optional[str] = None,
) -> ProductQuery:
    parsed_min_price = None
    if min_price is not None:
        parsed_min_price = to_number(min_price)
        if parsed_min_price is None:
            raise InvalidParameter("minPrice must be a number")

    sort_direction = None
    if sort:
        if sort not in SORT_OPTIONS:
            raise InvalidParameter('sort must be "price" or "-price"')
        sort_direction = SORT_OPTIONS[sort]

    projection = parse_fields(fields) if fields else ()

    return ProductQuery(
        category=category or None,
        min_price=parsed_min_price,
        sort_direction=sort_direction,
        fields=projection or None,
    )

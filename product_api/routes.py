# product_api/routes.py
import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from product_api.database import ProductStore
from product_api.errors import BadRequest, NotFound
from product_api.query import parse_product_query
from product_api.responses import (
    INVALID_BODY,
    created_body,
    deleted_body,
    links_body,
    list_body,
    updated_body,
)
from product_api.validation import (
    validate_new_product,
    validate_product_changes,
    validate_product_id,
)

router = APIRouter()


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


async def read_json_object(request: Request) -> Optional[Dict[str, Any]]:
    """Parse the request body; an empty body reads as None."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        raise BadRequest(INVALID_BODY)
    if not isinstance(payload, dict):
        raise BadRequest(INVALID_BODY)
    return payload


@router.get("/")
async def index():
    return links_body()


# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/api/products")
async def list_products(
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    sort: Optional[str] = None,
    fields: Optional[str] = None,
    store: ProductStore = Depends(get_store),
):
    query = parse_product_query(category, min_price, sort, fields)
    products = await store.find(query)
    return list_body(products)


@router.get("/api/products/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    product_id = validate_product_id(product_id)
    product = await store.find_by_id(product_id)
    if product is None:
        raise NotFound()
    return product


@router.post("/api/products", status_code=201)
async def create_product(
    payload: Optional[Dict[str, Any]] = Body(None),
    store: ProductStore = Depends(get_store),
):
    product = validate_new_product(payload)
    product_id = await store.insert(product)
    return created_body(product_id)


@router.put("/api/products/{product_id}")
async def update_product(
    product_id: str,
    request: Request,
    store: ProductStore = Depends(get_store),
):
    # the id is checked before the body is read
    product_id = validate_product_id(product_id)
    changes = validate_product_changes(await read_json_object(request))
    product = await store.update_by_id(product_id, changes)
    if product is None:
        raise NotFound()
    return updated_body(product)


@router.delete("/api/products/{product_id}")
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    product_id = validate_product_id(product_id)
    if not await store.delete_by_id(product_id):
        raise NotFound()
    return deleted_body()

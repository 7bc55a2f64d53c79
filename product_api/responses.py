# product_api/responses.py
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_api.errors import InternalError, ProductAPIError, StoreUnavailable

logger = logging.getLogger(__name__)

ENDPOINT_NOT_FOUND = "API endpoint not found"
SERVER_ERROR = "Server error"
INVALID_BODY = "Request body must be a JSON object"


# ---------------------------
# Success bodies
# ---------------------------
def links_body() -> Dict[str, Any]:
    return {"links": ["/api/products", "/api/products/:id"]}


def list_body(products: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"count": len(products), "products": products}


def created_body(product_id: str) -> Dict[str, Any]:
    return {"message": "Product created", "id": product_id}


def updated_body(product: Dict[str, Any]) -> Dict[str, Any]:
    return {"message": "Product updated", "product": product}


def deleted_body() -> Dict[str, Any]:
    return {"message": "Product deleted"}


# ---------------------------
# Error bodies
# ---------------------------
def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def store_not_ready() -> JSONResponse:
    return error_response(StoreUnavailable.status_code, StoreUnavailable.default_message)


async def _product_api_error(request: Request, exc: ProductAPIError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return error_response(500, SERVER_ERROR)
    return error_response(exc.status_code, exc.message)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unknown path, or a known path with a method it does not serve
    if exc.status_code in (404, 405):
        return error_response(404, ENDPOINT_NOT_FOUND)
    return error_response(exc.status_code, str(exc.detail))


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, INVALID_BODY)


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return error_response(500, SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProductAPIError, _product_api_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(Exception, _unhandled)

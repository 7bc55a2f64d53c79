# product_api/errors.py
from typing import Optional


class ConfigError(Exception):
    """Fatal configuration problem detected at startup."""


class ProductAPIError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------
# 400s: raised before the store is touched
# ---------------------------
class BadRequest(ProductAPIError):
    status_code = 400
    default_message = "Bad request"


class InvalidParameter(BadRequest):
    pass


class InvalidType(BadRequest):
    pass


class MissingField(BadRequest):
    pass


class InvalidIdentifier(BadRequest):
    default_message = "Invalid id"


# ---------------------------
# Store outcomes
# ---------------------------
class NotFound(ProductAPIError):
    status_code = 404
    default_message = "Not found"


class StoreUnavailable(ProductAPIError):
    status_code = 503
    default_message = "Database not ready yet. Try again in a moment."


class InternalError(ProductAPIError):
    """Store or runtime failure. The message is logged, never returned."""
    status_code = 500

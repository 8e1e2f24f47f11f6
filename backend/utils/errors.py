# backend/utils/errors.py
from typing import Optional


# Base class for every failure the API reports through the JSON envelope
class ShopError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


# Missing or malformed input
class ValidationError(ShopError):
    status_code = 400
    message = "Invalid request"


# Referenced entity does not exist
class NotFound(ShopError):
    status_code = 404
    message = "Not found"


# Requested quantity exceeds what is in stock
class InsufficientStock(ShopError):
    status_code = 400
    message = "Insufficient stock"


# Unique constraint violation (duplicate cart line, taken email)
class DuplicateEntry(ShopError):
    status_code = 400
    message = "Duplicate entry"


# Bad credentials or token
class AuthError(ShopError):
    status_code = 401
    message = "Invalid credentials"


# Persistence failure; the driver message is never sent to the caller
class StorageError(ShopError):
    status_code = 500
    message = "Storage failure"

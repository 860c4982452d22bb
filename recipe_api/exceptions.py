"""
Recipe API exception hierarchy.

Every error a handler can end with is one of these. The application
registers a single handler for RecipeApiError that renders the
``{"status": "error", "message", "data"?}`` envelope with ``status_code``.

    RecipeApiError
    ├── ValidationError      400  field-level detail in ``data``
    ├── AuthenticationError  401  generic message only
    ├── AuthorizationError   403
    ├── NotFoundError        404
    ├── ConflictError        409
    └── InternalFault        500  generic message, detail only in the logs
"""

from typing import Any, Optional


class RecipeApiError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationError(RecipeApiError):
    status_code = 400
    default_message = "Validation error"


class AuthenticationError(RecipeApiError):
    status_code = 401
    default_message = "Invalid token provided"


class AuthorizationError(RecipeApiError):
    status_code = 403
    default_message = "You are not allowed to perform this action"


class NotFoundError(RecipeApiError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(RecipeApiError):
    status_code = 409
    default_message = "Resource already exists"


class InternalFault(RecipeApiError):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self):
        # never carries detail to the client
        super().__init__()

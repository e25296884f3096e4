"""
Atelier Catalog — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for the product aggregate store.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by the normalizer, validation gate and product service;
       caught by global handlers.
When:  During request processing, before or instead of a storage write.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError   → 400 Bad Request (malformed, missing or out-of-range field)
    ├── NotFoundError     → 404 Not Found (unknown root, facet name or reference id)
    ├── ConflictError     → 409 Conflict (duplicate name or slug)
    └── InternalError     → 500 Internal Server Error (unexpected storage failure)

Storage errors never leave the service layer raw: unique-constraint
violations become ConflictError, everything else becomes InternalError.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """
    Raised when client input fails validation.

    When:    Unknown field, wrong type, length or range violation, bad enum
             member, unparsable date/JSON, blank product name.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Field 'currency' must be one of: EUR, GBP, PKR, USD",
            "details": {"field": "currency", "facet": "pricing"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown product id, unknown facet name on update, or a basic
             facet reference (category, collection, signature piece) that
             does not resolve to a live row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(CatalogError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Product name already used by a non-deleted product, basic slug
             already used by another product, or a storage unique constraint
             fired because a concurrent request won the race.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "A record with this data already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InternalError(CatalogError):
    """
    Raised when storage operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

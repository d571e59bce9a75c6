"""
Error types for the quote tool.

Every error carries a stable code, a message and optional details so the
HTTP layer can render them without knowing each subclass.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    code: str
    message: str
    details: Dict[str, Any] = {}


class QuoteToolError(Exception):
    """Base exception for the quote tool."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class ValidationError(QuoteToolError):
    """Malformed or incomplete entity construction. Not retried."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConfigurationError(QuoteToolError):
    """Rule registry is missing or inconsistent for a product variant."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ProductNotFoundError(QuoteToolError):
    """Requested product id is not in the repository."""

    def __init__(self, product_id: str):
        super().__init__(
            "PRODUCT_NOT_FOUND",
            f"Product '{product_id}' not found",
            {"product_id": product_id},
        )


class MissingFieldError(LookupError):
    """A rule predicate referenced a field the product and context both lack."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(field_name)

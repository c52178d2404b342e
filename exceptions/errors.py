"""
Custom exception classes for the application.

Every error carries a machine-readable code, a human-readable message and
the HTTP status it maps to.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class BadRequestError(AppError):
    """Request cannot be processed as sent (400)."""

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with {field} {value} already exists",
            details={field: value}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: Any):
        super().__init__(
            resource="Product",
            identifier=str(product_id),
            code="PRODUCT_NOT_FOUND"
        )


class ProductArticleExistsError(DuplicateError):
    """Product article already exists."""

    def __init__(self, article: str):
        super().__init__(
            resource="Product",
            field="article",
            value=article
        )


# ===================
# IMPORT ERRORS
# ===================

class NoFileUploadedError(BadRequestError):
    """Upload request carried no file or an empty one."""

    def __init__(self):
        super().__init__(
            code="NO_FILE_UPLOADED",
            message="No file uploaded"
        )


class UnsupportedFormatError(BadRequestError):
    """Uploaded file is not CSV, TSV, XLS or XLSX."""

    def __init__(self, filename: Optional[str], content_type: Optional[str]):
        super().__init__(
            code="UNSUPPORTED_FORMAT",
            message="Unsupported file format. Supported: CSV, TSV, XLS, XLSX",
            details={"filename": filename, "content_type": content_type}
        )


class FileDecodeError(BadRequestError):
    """Uploaded file has a supported format but could not be parsed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="FILE_DECODE_ERROR",
            message=f"Failed to read file: {message}",
            details=details
        )


class RowRejectedError(ValidationError):
    """A single import row cannot be turned into a product."""

    def __init__(self, reason: str, row_number: Optional[int] = None):
        super().__init__(
            code="ROW_REJECTED",
            message=reason,
            details={"row": row_number}
        )

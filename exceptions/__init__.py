"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    BadRequestError,
    ValidationError,
    ConflictError,
    DuplicateError,
    DatabaseError,

    # Product-specific
    ProductNotFoundError,
    ProductArticleExistsError,

    # Import
    NoFileUploadedError,
    UnsupportedFormatError,
    FileDecodeError,
    RowRejectedError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "BadRequestError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "DatabaseError",

    # Product
    "ProductNotFoundError",
    "ProductArticleExistsError",

    # Import
    "NoFileUploadedError",
    "UnsupportedFormatError",
    "FileDecodeError",
    "RowRejectedError",
]

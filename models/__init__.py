"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.product import (
    SortField,
    SortOrder,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from models.product_import import ImportOutcome

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Product
    "SortField",
    "SortOrder",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",

    # Import
    "ImportOutcome",
]

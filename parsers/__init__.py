"""
Import file parsers module.

tabular_parser reads uploads into raw rows, column_aliases maps raw headers
to product fields, product_row turns a raw row into a ProductRecord.
"""

from parsers.tabular_parser import (
    parse_tabular_file,
    is_supported_format,
    ACCEPTED_CONTENT_TYPES,
    RawRow,
)
from parsers.column_aliases import COLUMN_ALIASES, resolve_field
from parsers.product_row import (
    ProductRecord,
    normalize_row,
    parse_price,
)

__all__ = [
    "parse_tabular_file",
    "is_supported_format",
    "ACCEPTED_CONTENT_TYPES",
    "RawRow",
    "COLUMN_ALIASES",
    "resolve_field",
    "ProductRecord",
    "normalize_row",
    "parse_price",
]

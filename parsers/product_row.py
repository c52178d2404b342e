"""
Row normalizer for product imports.

Turns a raw row (header -> cell text) into a ProductRecord. Only presence
of article and name is checked here; column length limits are enforced
when the record is saved.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional
import json
import re

from exceptions import RowRejectedError
from parsers.column_aliases import resolve_field


# Anything that is not a digit or a separator ("1 234,56 руб." -> "1234,56.")
_PRICE_NOISE = re.compile(r"[^\d.,]")


@dataclass
class ProductRecord:
    """Normalized product row, ready to be saved."""
    article: str
    name: str
    brand: Optional[str] = None
    price: Optional[Decimal] = None
    color: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def parse_price(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a price written with either comma or dot as decimal separator.

    Currency symbols, spaces and words are dropped. Text that does not
    reduce to a single number gives None. Thousands separators are not
    understood: "1.234.567" is not a price.

    Examples:
        "1 234,56 руб." -> Decimal("1234.56")
        "$19.99"        -> Decimal("19.99")
        "N/A"           -> None
    """
    if not text:
        return None

    cleaned = _PRICE_NOISE.sub("", text).replace(",", ".").strip(".")
    if not cleaned:
        return None

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def serialize_row(row: Mapping[str, Any]) -> str:
    """Row as JSON for error messages (keeps Cyrillic readable)."""
    try:
        return json.dumps(dict(row), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(row)


def normalize_row(row: Mapping[str, Any], row_number: Optional[int] = None) -> ProductRecord:
    """
    Normalize one raw import row.

    Args:
        row: Raw row mapping header -> cell value
        row_number: Position in the file, used in the rejection message

    Returns:
        ProductRecord with blank optional fields left as None

    Raises:
        RowRejectedError: If article or name is missing
    """
    article = resolve_field(row, "article")
    name = resolve_field(row, "name")

    if not article or not name:
        prefix = f"Row {row_number}: " if row_number is not None else ""
        raise RowRejectedError(
            f"{prefix}skipped, missing article or name - {serialize_row(row)}",
            row_number=row_number,
        )

    return ProductRecord(
        article=article,
        name=name,
        brand=resolve_field(row, "brand"),
        price=parse_price(resolve_field(row, "price")),
        color=resolve_field(row, "color"),
        country=resolve_field(row, "country"),
    )

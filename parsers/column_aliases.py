"""
Column alias table for product imports.

Supplier exports name the same column differently (Russian or English,
various casings). COLUMN_ALIASES lists the accepted headers per product
field in preference order; the first header that is present with a
non-blank value wins.
"""

from typing import Any, Mapping, Optional


COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "article": (
        "Артикул",
        "артикул",
        "Article",
        "article",
        "SKU",
        "sku",
    ),
    "name": (
        "Название товара",
        "название товара",
        "Название",
        "название",
        "Name",
        "name",
        "Product Name",
        "product name",
    ),
    "price": (
        "Цена, руб.*",
        "Цена",
        "цена",
        "Price",
        "price",
    ),
    "brand": (
        "Бренд",
        "бренд",
        "Brand",
        "brand",
    ),
    "color": (
        "Цвет",
        "цвет",
        "Color",
        "color",
    ),
    "country": (
        "Страна-изготовитель",
        "страна-изготовитель",
        "Страна",
        "страна",
        "Country",
        "country",
    ),
}


def resolve_field(row: Mapping[str, Any], field: str) -> Optional[str]:
    """
    Get a product field's value from a raw row.

    Header matching is exact (case-sensitive); cell values are trimmed.

    Args:
        row: Raw row mapping header -> cell value
        field: Canonical field name, one of COLUMN_ALIASES keys

    Returns:
        Trimmed value of the first matching non-blank column, or None

    Raises:
        KeyError: If field has no alias list
    """
    for header in COLUMN_ALIASES[field]:
        value = row.get(header)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None

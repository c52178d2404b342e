"""
Unit tests for the import column alias table.

Run: pytest tests/unit/test_column_aliases.py -v
"""

import pytest

from parsers.column_aliases import COLUMN_ALIASES, resolve_field


class TestAliasTable:
    """Tests for COLUMN_ALIASES contents."""

    def test_covers_every_product_field(self):
        """Every importable field has aliases."""
        assert set(COLUMN_ALIASES) == {"article", "name", "price", "brand", "color", "country"}

    def test_article_preference_order(self):
        """Russian headers come before English ones, SKU last."""
        assert COLUMN_ALIASES["article"] == (
            "Артикул", "артикул", "Article", "article", "SKU", "sku"
        )

    def test_price_prefers_marketplace_header(self):
        """The marketplace template header is checked first."""
        assert COLUMN_ALIASES["price"][0] == "Цена, руб.*"


class TestResolveField:
    """Tests for resolve_field()"""

    def test_first_synonym_wins(self):
        """Артикул beats SKU when both are filled."""
        row = {"SKU": "A2", "Артикул": "A1"}

        assert resolve_field(row, "article") == "A1"

    def test_falls_through_blank_values(self):
        """A blank preferred column does not hide a filled one."""
        row = {"Артикул": "   ", "sku": "A9"}

        assert resolve_field(row, "article") == "A9"

    def test_value_is_trimmed(self):
        """Surrounding whitespace is removed from the value."""
        row = {"Название товара": "  Кружка  "}

        assert resolve_field(row, "name") == "Кружка"

    def test_header_match_is_case_sensitive(self):
        """Only listed casings match."""
        row = {"ARTICLE": "A1", "BRAND": "Tefal"}

        assert resolve_field(row, "article") is None
        assert resolve_field(row, "brand") is None

    def test_missing_field_returns_none(self):
        """No matching column at all."""
        assert resolve_field({"Описание": "что-то"}, "color") is None

    def test_non_string_value_converted(self):
        """Numeric cells are read as text."""
        assert resolve_field({"Price": 199.5}, "price") == "199.5"

    @pytest.mark.parametrize("header", [
        "Страна-изготовитель",
        "страна-изготовитель",
        "Страна",
        "страна",
        "Country",
        "country",
    ])
    def test_country_headers(self, header):
        """Every listed country header is recognized."""
        assert resolve_field({header: "Китай"}, "country") == "Китай"

    def test_unknown_field_raises(self):
        """Asking for a field with no alias list is a programming error."""
        with pytest.raises(KeyError):
            resolve_field({"a": "b"}, "weight")

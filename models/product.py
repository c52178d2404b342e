"""
Product schemas for validation and serialization.

Length limits mirror the products table columns, so a record that passes
ProductCreate fits the database.
"""

from pydantic import Field, field_validator
from typing import Optional
from decimal import Decimal
from enum import Enum

from models.base import BaseSchema, TimestampMixin


class SortField(str, Enum):
    """Columns a product listing can be ordered by."""
    ARTICLE = "article"
    NAME = "name"
    BRAND = "brand"
    PRICE = "price"
    COLOR = "color"
    COUNTRY = "country"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        """Database column backing this sort field."""
        if self is SortField.CREATED_AT:
            return "created_at"
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortField":
        """Resolve a query value, falling back to createdAt when unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.CREATED_AT


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "ASC"
    DESC = "DESC"


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: article, name
    Optional: brand, price, color, country
    """

    article: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Product article (unique identifier)",
        examples=["AB-1042"]
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Product name",
        examples=["Кружка керамическая 350 мл"]
    )
    brand: Optional[str] = Field(None, max_length=100, description="Brand")
    price: Optional[Decimal] = Field(None, ge=0, description="Price")
    color: Optional[str] = Field(None, max_length=50, description="Color")
    country: Optional[str] = Field(
        None,
        max_length=100,
        description="Country of manufacture"
    )

    @field_validator("brand", "color", "country", mode="before")
    @classmethod
    def blank_optional_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Blank optional text is stored as NULL."""
        return _blank_to_none(v) if isinstance(v, str) else v

    def to_row(self) -> dict:
        """Shape for a database insert; unset optional fields are sent as NULL."""
        return super().to_row()


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    article: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    brand: Optional[str] = Field(None, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    color: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=100)

    def to_row(self) -> dict:
        """Only the fields the caller actually sent."""
        return super().to_row(exclude_unset=True)


class ProductResponse(BaseSchema, TimestampMixin):
    """
    Product response with all fields.

    Used for GET responses.
    """

    id: int = Field(..., description="Product ID")
    article: str = Field(..., description="Product article")
    name: str = Field(..., description="Product name")
    brand: Optional[str] = Field(None, description="Brand")
    price: Optional[Decimal] = Field(None, description="Price")
    color: Optional[str] = Field(None, description="Color")
    country: Optional[str] = Field(None, description="Country of manufacture")

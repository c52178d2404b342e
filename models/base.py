"""
Base schemas for product models.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )

    def to_row(self, exclude_unset: bool = False) -> dict:
        """
        Dump to a dict the Supabase client can send as JSON.

        Decimal values become float; PostgREST takes numeric as a JSON number.
        """
        data = self.model_dump(exclude_unset=exclude_unset)
        return {
            key: float(value) if isinstance(value, Decimal) else value
            for key, value in data.items()
        }


class TimestampMixin(BaseModel):
    """created_at/updated_at as set by the products table defaults."""
    created_at: datetime
    updated_at: Optional[datetime] = None

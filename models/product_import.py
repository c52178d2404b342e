"""
Schemas for bulk product import results.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ImportOutcome(BaseModel):
    """
    Summary of one import run.

    errors and duplicates are None when empty so they drop out of the
    response (routes use response_model_exclude_none).
    """

    imported_count: int = Field(0, ge=0, description="Products created")
    errors: Optional[list[str]] = Field(
        None,
        description="One message per rejected row or failed write, in row order"
    )
    duplicates: Optional[list[str]] = Field(
        None,
        description="One message per row skipped as an existing article, in row order"
    )

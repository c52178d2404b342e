"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.import_service import ProductImportService, get_import_service

__all__ = [
    "ProductService",
    "get_product_service",
    "ProductImportService",
    "get_import_service",
]

"""
Product API routes.

Errors use the standard {"error": {...}} response format.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    SortField,
    SortOrder,
)
from services.product_service import get_product_service
from exceptions import (
    AppError,
    ProductNotFoundError,
    ProductArticleExistsError
)

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=list[ProductResponse])
async def list_products(
    search: Optional[str] = Query(None, description="Substring of name, article or brand"),
    brand: Optional[str] = Query(None, description="Substring of brand"),
    sort_by: str = Query("createdAt", description="article, name, brand, price, color, country or createdAt"),
    sort_order: SortOrder = Query(SortOrder.DESC, description="ASC or DESC")
):
    """
    List products with optional search and brand filters.

    Unknown sort_by values fall back to createdAt.
    """
    try:
        service = get_product_service()
        return service.find_with_filters(
            search=search,
            brand=brand,
            sort_by=SortField.parse(sort_by),
            sort_order=sort_order
        )

    except Exception as e:
        return handle_error(e)


@router.get("/brands", response_model=list[str])
async def list_brands():
    """Distinct brands in the catalog, alphabetical."""
    try:
        service = get_product_service()
        return service.get_brands()

    except Exception as e:
        return handle_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        return service.get_by_id(product_id)

    except ProductNotFoundError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(data: ProductCreate):
    """
    Create a new product.

    Raises:
        409: Article already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        return service.create(data)

    except ProductArticleExistsError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: int, data: ProductUpdate):
    """
    Update an existing product.

    Only provided fields are updated.

    Raises:
        404: Product not found
        409: New article already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        return service.update(product_id, data)

    except (ProductNotFoundError, ProductArticleExistsError) as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.delete("/{product_id}")
async def delete_product(product_id: int):
    """
    Delete a product.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        service.delete(product_id)
        return {"message": "Product deleted"}

    except ProductNotFoundError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)

"""
Product import API routes.

POST /api/import takes a multipart "file" (CSV, TSV, XLS or XLSX) and
returns the import outcome. errors and duplicates are left out of the
response when empty.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from config import DatabaseConnectionError
from models.product_import import ImportOutcome
from services.import_service import get_import_service
from exceptions import (
    AppError,
    DatabaseError,
    NoFileUploadedError,
    UnsupportedFormatError,
    FileDecodeError,
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

@router.post("", response_model=ImportOutcome, response_model_exclude_none=True)
async def import_products(file: Optional[UploadFile] = File(None)):
    """
    Import products from an uploaded table.

    Each row is imported independently; existing articles are skipped.

    Raises:
        400: No file, unsupported format, or unreadable file
        500: Database unavailable
    """
    try:
        if file is None:
            raise NoFileUploadedError()

        content = await file.read()
        if not content:
            raise NoFileUploadedError()

        try:
            service = get_import_service()
        except DatabaseConnectionError as e:
            raise DatabaseError("connect", str(e))

        return service.import_file(content, file.filename, file.content_type)

    except (NoFileUploadedError, UnsupportedFormatError, FileDecodeError) as e:
        logger.warning("import_rejected", code=e.code, message=e.message)
        return handle_error(e)
    except Exception as e:
        return handle_error(e)

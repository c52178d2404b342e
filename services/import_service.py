"""
Bulk product import from CSV/TSV/XLS/XLSX uploads.

Rows are handled one at a time, in file order, and each row ends in exactly
one outcome:

    Imported   - product created
    Duplicate  - article already in the catalog, row skipped (no update)
    Rejected   - row could not be normalized or saved

A bad row never stops the rows after it. Only an unreadable file
(UnsupportedFormatError, FileDecodeError) fails the whole import.

The duplicate lookup and the insert are separate calls, so a concurrent
writer can take the article in between. The insert then fails on the
unique constraint and the row is reported as an error.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union
import structlog

from pydantic import ValidationError as PydanticValidationError

from exceptions import AppError, RowRejectedError
from models.product import ProductCreate
from models.product_import import ImportOutcome
from parsers.product_row import normalize_row, serialize_row
from parsers.tabular_parser import parse_tabular_file
from services.product_service import ProductService, get_product_service

logger = structlog.get_logger(__name__)


# ===================
# ROW OUTCOMES
# ===================

@dataclass(frozen=True)
class Imported:
    article: str


@dataclass(frozen=True)
class Duplicate:
    article: str

    @property
    def message(self) -> str:
        return f"Product with article {self.article} already exists"


@dataclass(frozen=True)
class Rejected:
    reason: str


RowOutcome = Union[Imported, Duplicate, Rejected]


def fold_outcomes(outcomes: Iterable[RowOutcome]) -> ImportOutcome:
    """Collapse per-row outcomes into counts and messages, keeping row order."""
    imported = 0
    errors: list[str] = []
    duplicates: list[str] = []

    for outcome in outcomes:
        if isinstance(outcome, Imported):
            imported += 1
        elif isinstance(outcome, Duplicate):
            duplicates.append(outcome.message)
        else:
            errors.append(outcome.reason)

    return ImportOutcome(
        imported_count=imported,
        errors=errors or None,
        duplicates=duplicates or None,
    )


def _describe(error: Exception) -> str:
    """Short cause text for a failed save."""
    if isinstance(error, PydanticValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in error.errors()
        )
    if isinstance(error, AppError):
        return error.message
    return str(error)


class ProductImportService:
    """
    Imports products from uploaded tabular files.

    Owns the per-row commit/skip/reject decision. Failed saves are
    reported, never retried.
    """

    def __init__(self, product_service: Optional[ProductService] = None):
        self.products = product_service or get_product_service()

    def import_file(
        self,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str] = None
    ) -> ImportOutcome:
        """
        Parse an upload and import every row.

        Args:
            content: Uploaded file bytes
            filename: Client filename (selects CSV/TSV vs workbook)
            content_type: Declared MIME type

        Returns:
            ImportOutcome

        Raises:
            UnsupportedFormatError: File type not accepted
            FileDecodeError: File could not be parsed
        """
        logger.info(
            "import_started",
            filename=filename,
            content_type=content_type,
            size_bytes=len(content)
        )

        rows = parse_tabular_file(content, filename, content_type)
        return self.import_rows(rows)

    def import_rows(self, rows: Iterable[Mapping[str, object]]) -> ImportOutcome:
        """
        Import already-parsed raw rows in order.

        Returns:
            ImportOutcome with imported_count, errors and duplicates
        """
        outcomes = [
            self._import_row(row, row_number)
            for row_number, row in enumerate(rows, start=1)
        ]
        result = fold_outcomes(outcomes)

        logger.info(
            "import_complete",
            rows=len(outcomes),
            imported=result.imported_count,
            errors=len(result.errors or []),
            duplicates=len(result.duplicates or [])
        )

        return result

    def _import_row(self, row: Mapping[str, object], row_number: int) -> RowOutcome:
        """Normalize, check for duplicate, then save a single row."""
        try:
            record = normalize_row(row, row_number)
        except RowRejectedError as e:
            logger.info("import_row_rejected", row=row_number, reason=e.message)
            return Rejected(e.message)
        except Exception as e:
            logger.warning(
                "import_row_failed",
                row=row_number,
                error=str(e),
                error_type=type(e).__name__
            )
            return Rejected(
                f"Row {row_number}: failed to process {serialize_row(row)} - {e}"
            )

        try:
            if self.products.get_by_article(record.article):
                logger.info("import_row_duplicate", row=row_number, article=record.article)
                return Duplicate(record.article)

            self.products.create(ProductCreate(**record.to_dict()))

        except Exception as e:
            logger.warning(
                "import_row_save_failed",
                row=row_number,
                article=record.article,
                error=str(e),
                error_type=type(e).__name__
            )
            return Rejected(f"Failed to save product {record.article}: {_describe(e)}")

        return Imported(record.article)


# Singleton instance for convenience
_import_service: Optional[ProductImportService] = None

def get_import_service() -> ProductImportService:
    """Get or create ProductImportService instance."""
    global _import_service
    if _import_service is None:
        _import_service = ProductImportService()
    return _import_service

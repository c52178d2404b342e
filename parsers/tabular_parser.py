"""
Tabular file parser for product imports.

Reads CSV, TSV, XLS and XLSX uploads into raw rows (header -> cell text).
The whole file is parsed up front: either every row is returned or
FileDecodeError is raised.

Delimited text skips only truly empty lines. A separator-only line such as
",," is kept as a row of empty cells, so the importer reports it as a row
missing article and name. Workbook rows with every cell empty are dropped.
Cells past the last header column are ignored.
"""

from io import BytesIO, StringIO
from typing import Optional
import re
import structlog

import pandas as pd

from exceptions import FileDecodeError, UnsupportedFormatError

logger = structlog.get_logger(__name__)


ACCEPTED_CONTENT_TYPES = frozenset({
    "text/csv",
    "text/tab-separated-values",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})

_SUPPORTED_EXTENSION = re.compile(r"\.(csv|tsv|xls|xlsx)$", re.IGNORECASE)
_DELIMITED_EXTENSION = re.compile(r"\.(csv|tsv)$", re.IGNORECASE)

RawRow = dict[str, str]


def is_supported_format(filename: Optional[str], content_type: Optional[str]) -> bool:
    """True if either the declared MIME type or the extension is accepted."""
    if content_type in ACCEPTED_CONTENT_TYPES:
        return True
    return bool(filename and _SUPPORTED_EXTENSION.search(filename))


def delimiter_for(filename: str) -> str:
    """Tab for .tsv files, comma otherwise."""
    return "\t" if ".tsv" in filename.lower() else ","


def parse_tabular_file(
    content: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
) -> list[RawRow]:
    """
    Parse an uploaded file into raw rows.

    .csv/.tsv names are read as UTF-8 delimited text. Anything else that
    passed the format check is read as a workbook (first sheet only).

    Args:
        content: File bytes
        filename: Name the client sent; drives format detection
        content_type: MIME type the client declared

    Returns:
        Rows in file order; every value is a string, missing cells are ""

    Raises:
        UnsupportedFormatError: Neither MIME type nor extension is accepted
        FileDecodeError: File could not be parsed in the detected format
    """
    if not is_supported_format(filename, content_type):
        logger.warning(
            "unsupported_upload_format",
            filename=filename,
            content_type=content_type
        )
        raise UnsupportedFormatError(filename, content_type)

    if filename and _DELIMITED_EXTENSION.search(filename):
        separator = delimiter_for(filename)
        df = _load_delimited(content, separator)
        file_format = "tsv" if separator == "\t" else "csv"
    else:
        df = _load_workbook(content, filename)
        file_format = "workbook"

    rows = _to_rows(df, drop_blank=(file_format == "workbook"))

    logger.info(
        "tabular_file_parsed",
        filename=filename,
        format=file_format,
        rows=len(rows),
        columns=len(df.columns)
    )

    return rows


# ===================
# LOADERS
# ===================

def _load_delimited(content: bytes, separator: str) -> pd.DataFrame:
    """Load CSV/TSV text, header row as column names, all cells as text."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error("delimited_decode_failed", error=str(e))
        raise FileDecodeError(str(e), details={"encoding": "utf-8"})

    try:
        return pd.read_csv(
            StringIO(text),
            sep=separator,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            # Never take the first column as index when rows carry trailing cells
            index_col=False,
        )
    except pd.errors.EmptyDataError:
        # Empty file: nothing to import
        return pd.DataFrame()
    except Exception as e:
        logger.error("delimited_parse_failed", separator=repr(separator), error=str(e))
        raise FileDecodeError(str(e), details={"separator": separator})


def _load_workbook(content: bytes, filename: Optional[str]) -> pd.DataFrame:
    """Load the first sheet of an Excel workbook, all cells as text."""
    # xlrd reads legacy .xls, openpyxl reads .xlsx; unknown names let pandas sniff
    engine = None
    if filename:
        lower = filename.lower()
        if lower.endswith(".xls"):
            engine = "xlrd"
        elif lower.endswith(".xlsx"):
            engine = "openpyxl"

    try:
        return pd.read_excel(
            BytesIO(content),
            sheet_name=0,
            dtype=str,
            keep_default_na=False,
            engine=engine,
        )
    except Exception as e:
        logger.error(
            "workbook_parse_failed",
            filename=filename,
            engine=engine,
            error=str(e),
            error_type=type(e).__name__
        )
        raise FileDecodeError(str(e), details={"engine": engine})


def _to_rows(df: pd.DataFrame, drop_blank: bool = True) -> list[RawRow]:
    """Convert a DataFrame to header -> text mappings, optionally dropping blank rows."""
    if df.empty:
        return []

    df = df.fillna("")
    df.columns = [str(col) for col in df.columns]

    rows = []
    for record in df.to_dict(orient="records"):
        row = {key: str(value) for key, value in record.items()}
        if drop_blank and all(not value.strip() for value in row.values()):
            continue
        rows.append(row)
    return rows

"""CSV reader producing dict records."""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from data_sanitizer.models.field import Field, FieldKind, Schema
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)

# Maximum CSV file size to prevent memory exhaustion (50 MB)
MAX_CSV_FILE_SIZE = 50 * 1024 * 1024

# Maximum number of rows to prevent memory exhaustion from many small rows
MAX_CSV_ROWS = 500_000

# Delimiters considered during detection
_CANDIDATE_DELIMITERS = ",;\t|"


class ParseError(Exception):
    """Exception raised when parsing fails."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(message)


@dataclass
class CSVTable:
    """Parsed CSV content.

    Attributes:
        headers: Column names in file order.
        rows: One dict per data row, keyed by column name.
        delimiter: Delimiter the file was read with.
    """

    headers: list[str]
    rows: list[dict[str, object]] = field(default_factory=list)
    delimiter: str = ","


def _detect_delimiter(sample: str) -> str:
    """Detect the delimiter from a sample of the file.

    Args:
        sample: First few KB of the file.

    Returns:
        Detected delimiter, "," if detection fails.
    """
    try:
        return csv.Sniffer().sniff(sample, delimiters=_CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return ","


def read_csv(file_path: Path, delimiter: Optional[str] = None) -> CSVTable:
    """Read a CSV file with a header row.

    Args:
        file_path: Path to the CSV file.
        delimiter: Delimiter to use, or None to detect it.

    Returns:
        CSVTable with headers and rows.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ParseError: If the file is too large, has no header, or is malformed.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    file_size = file_path.stat().st_size
    if file_size > MAX_CSV_FILE_SIZE:
        raise ParseError(
            f"File too large ({file_size:,} bytes, max {MAX_CSV_FILE_SIZE:,})",
            file_path,
        )

    with open(file_path, newline="", encoding="utf-8-sig") as f:
        if delimiter is None:
            delimiter = _detect_delimiter(f.read(8192))
            f.seek(0)

        reader = csv.DictReader(f, delimiter=delimiter)
        try:
            headers = list(reader.fieldnames or [])
        except csv.Error as e:
            raise ParseError(f"Malformed CSV header: {e}", file_path) from e

        if not headers:
            raise ParseError("CSV file has no header row", file_path)

        rows: list[dict[str, object]] = []
        try:
            for row in reader:
                if len(rows) >= MAX_CSV_ROWS:
                    raise ParseError(f"File exceeds {MAX_CSV_ROWS:,} rows", file_path)
                # Extra cells beyond the header land under the None key
                rows.append({k: v for k, v in row.items() if k is not None})
        except csv.Error as e:
            raise ParseError(f"Malformed CSV at line {reader.line_num}: {e}", file_path) from e

    logger.info(f"Read {len(rows)} rows with {len(headers)} columns from {file_path}")
    return CSVTable(headers=headers, rows=rows, delimiter=delimiter)


def infer_schema(headers: list[str]) -> Schema:
    """Build a schema treating every column as a string field.

    Args:
        headers: Column names.

    Returns:
        Schema with one STRING field per column.
    """
    return Schema.from_fields(*(Field(name=h, kind=FieldKind.STRING) for h in headers))

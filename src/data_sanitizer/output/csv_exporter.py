"""CSV exporter for sanitized records."""

import csv
from pathlib import Path
from typing import Optional

from data_sanitizer.config import OutputConfig
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)

# Separator used when a list value is flattened into one cell
LIST_SEPARATOR = "; "


def cell_text(value: object) -> str:
    """Render a record value as cell text.

    Args:
        value: Record value (None, string, list, or scalar).

    Returns:
        Text for the cell; None becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, list):
        return LIST_SEPARATOR.join(cell_text(v) for v in value)
    return str(value)


class CSVExporter:
    """Writes records to a CSV file.

    Values are written as-is; sanitizing is the job of the record
    processor that produced them.
    """

    def __init__(self, output_config: Optional[OutputConfig] = None):
        """Initialize CSV exporter.

        Args:
            output_config: Output configuration (defaults if None).
        """
        self.output_config = output_config or OutputConfig()

    def export(
        self,
        output_path: Path,
        headers: list[str],
        rows: list[dict[str, object]],
    ) -> Path:
        """Export records to a CSV file.

        Args:
            output_path: Destination file.
            headers: Column names, in output order.
            rows: Records keyed by column name.

        Returns:
            Path to the created file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, delimiter=self.output_config.delimiter)
            writer.writerow(headers)
            for row in rows:
                writer.writerow([cell_text(row.get(h)) for h in headers])

        logger.info(f"Exported {len(rows)} rows to {output_path}")
        return output_path

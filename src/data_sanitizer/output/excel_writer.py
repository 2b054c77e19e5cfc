"""Excel workbook writer for sanitized records."""

from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from data_sanitizer.config import OutputConfig
from data_sanitizer.output.csv_exporter import cell_text
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)

# Excel limits sheet names to 31 characters
MAX_SHEET_NAME_LENGTH = 31

# Column width bounds (in characters)
MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 60


class ExcelWriter:
    """Writes records to a single-sheet Excel workbook.

    Every cell is stored with the string data type, so no value is
    ever evaluated as a formula when the workbook is opened. Control
    characters that the xlsx format cannot hold are dropped.
    """

    def __init__(self, output_config: Optional[OutputConfig] = None):
        """Initialize Excel writer.

        Args:
            output_config: Output configuration (defaults if None).
        """
        self.output_config = output_config or OutputConfig()

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )

    def write(
        self,
        output_path: Path,
        headers: list[str],
        rows: list[dict[str, object]],
        sheet_name: Optional[str] = None,
    ) -> Path:
        """Write records to an .xlsx workbook.

        Args:
            output_path: Destination file.
            headers: Column names, in output order.
            rows: Records keyed by column name.
            sheet_name: Worksheet title (default from config).

        Returns:
            Path to the created file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        wb = Workbook()
        ws = wb.active
        ws.title = (sheet_name or self.output_config.sheet_name)[:MAX_SHEET_NAME_LENGTH]

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col)
            self._set_text(cell, header)
            cell.font = self.header_font
            cell.fill = self.header_fill

        widths = [len(h) for h in headers]
        for row_idx, row in enumerate(rows, 2):
            for col, header in enumerate(headers, 1):
                text = cell_text(row.get(header))
                if text:
                    self._set_text(ws.cell(row=row_idx, column=col), text)
                widths[col - 1] = max(widths[col - 1], len(text))

        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = min(
                max(width + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
            )
        ws.freeze_panes = "A2"

        wb.save(output_path)
        logger.info(f"Wrote {len(rows)} rows to {output_path}")
        return output_path

    @staticmethod
    def _set_text(cell, text: str) -> None:
        # Control characters are not allowed in the XML of a worksheet
        text = ILLEGAL_CHARACTERS_RE.sub("", text)
        # openpyxl marks strings starting with "=" as formulas on assignment
        cell.value = text
        cell.data_type = "s"

"""Output generation for CSV and Excel exports."""

from data_sanitizer.output.csv_exporter import CSVExporter
from data_sanitizer.output.excel_writer import ExcelWriter

__all__ = ["ExcelWriter", "CSVExporter"]

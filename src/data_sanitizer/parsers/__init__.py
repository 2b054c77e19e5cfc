"""File parsers producing dict records."""

from data_sanitizer.parsers.csv_reader import CSVTable, ParseError, infer_schema, read_csv

__all__ = [
    "CSVTable",
    "ParseError",
    "infer_schema",
    "read_csv",
]

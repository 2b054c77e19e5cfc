"""Sanitize and validate record fields against spreadsheet formula injection."""

__version__ = "1.0.0"

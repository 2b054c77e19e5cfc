"""Record processing against sanitizer pipelines."""

from data_sanitizer.processing.record_processor import (
    RecordProcessor,
    ValidationError,
    ValidationIssue,
    find_pipeline_issues,
    process_records,
)

__all__ = [
    "RecordProcessor",
    "ValidationError",
    "ValidationIssue",
    "find_pipeline_issues",
    "process_records",
]

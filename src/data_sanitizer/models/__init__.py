"""Data models for rules, options, and record schemas."""

from data_sanitizer.models.field import Field, FieldKind, Schema
from data_sanitizer.models.options import SanitizerOptions
from data_sanitizer.models.rule import (
    BuiltInRule,
    Predicate,
    SanitizerSpec,
    Transform,
    ValidatorSpec,
)

__all__ = [
    "BuiltInRule",
    "Predicate",
    "SanitizerSpec",
    "Transform",
    "ValidatorSpec",
    "SanitizerOptions",
    "Field",
    "FieldKind",
    "Schema",
]

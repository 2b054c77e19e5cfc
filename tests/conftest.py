"""Shared fixtures."""

import pytest

from data_sanitizer.models.field import Field, FieldKind, Schema
from data_sanitizer.models.options import SanitizerOptions


def _upper(value):
    return value.upper() if isinstance(value, str) else value


def _lower(value):
    return value.lower() if isinstance(value, str) else value


@pytest.fixture
def user_schema() -> Schema:
    """A user schema with an opted-out field and case-normalizing fields."""
    return Schema.from_fields(
        Field(name="firstName"),
        Field(name="middleName", options=SanitizerOptions(skip_all=True)),
        Field(name="lastName"),
        Field(name="age", kind=FieldKind.OTHER),
        Field(name="email"),
        Field(name="hasChildren", kind=FieldKind.OTHER),
    )


@pytest.fixture
def case_transforms():
    """Upper/lower-casing transforms for custom sanitizer tests."""
    return _upper, _lower

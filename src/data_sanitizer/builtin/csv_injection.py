"""CSV/spreadsheet formula injection rule."""

from typing import Optional

from data_sanitizer.models.rule import BuiltInRule, SanitizerSpec, ValidatorSpec

# Characters that trigger formula execution in spreadsheet applications
# when they appear at the start of a cell value
FLAGGED_PREFIXES = ("=", "+", "-", "@")

# Leading quote forces the cell to be treated as literal text
NEUTRALIZING_PREFIX = "'"

ERROR_MESSAGE = "[CSV] Invalid character in string"


def is_safe(value: Optional[str]) -> bool:
    """Check whether a value is free of a formula-triggering first character.

    Only the first character is inspected. Empty and None values are safe.

    Args:
        value: String value to check, or None.

    Returns:
        False if the value starts with a flagged character, True otherwise.
    """
    if not value:
        return True
    return value[0] not in FLAGGED_PREFIXES


def sanitize(value: Optional[str]) -> Optional[str]:
    """Neutralize a value that would be interpreted as a spreadsheet formula.

    Args:
        value: String value to sanitize, or None.

    Returns:
        The value prefixed with a single quote if unsafe, otherwise the
        value unchanged.
    """
    if not is_safe(value):
        return NEUTRALIZING_PREFIX + value  # type: ignore[operator]
    return value


CSV_INJECTION = BuiltInRule(
    name="csv-injection",
    sanitizer=SanitizerSpec(getter=sanitize, setter=sanitize),
    validator=ValidatorSpec(predicate=is_safe, message=ERROR_MESSAGE),
)

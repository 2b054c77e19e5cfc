"""Registry of built-in sanitizing and validating rules."""

from data_sanitizer.builtin.csv_injection import CSV_INJECTION, is_safe, sanitize
from data_sanitizer.models.rule import BuiltInRule


class UnknownRuleError(Exception):
    """Exception raised when a built-in rule name is not registered."""

    def __init__(self, name: str):
        """Initialize UnknownRuleError.

        Args:
            name: The rule name that was requested.
        """
        self.name = name
        available = ", ".join(sorted(BUILT_IN_RULES))
        super().__init__(f"Unknown built-in rule '{name}' (available: {available})")


BUILT_IN_RULES: dict[str, BuiltInRule] = {
    CSV_INJECTION.name: CSV_INJECTION,
}


def get_builtin_rule(name: str) -> BuiltInRule:
    """Look up a built-in rule by name.

    Args:
        name: Registry name of the rule.

    Returns:
        The registered rule.

    Raises:
        UnknownRuleError: If no rule is registered under that name.
    """
    try:
        return BUILT_IN_RULES[name]
    except KeyError:
        raise UnknownRuleError(name) from None


def list_builtin_rules() -> list[str]:
    """Return the names of all registered rules, sorted."""
    return sorted(BUILT_IN_RULES)


__all__ = [
    "BUILT_IN_RULES",
    "CSV_INJECTION",
    "UnknownRuleError",
    "get_builtin_rule",
    "is_safe",
    "list_builtin_rules",
    "sanitize",
]

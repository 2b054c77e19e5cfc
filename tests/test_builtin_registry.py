"""Tests for the built-in rule registry."""

import pytest

from data_sanitizer.builtin import (
    BUILT_IN_RULES,
    CSV_INJECTION,
    UnknownRuleError,
    get_builtin_rule,
    list_builtin_rules,
)


class TestRegistry:
    """Tests for rule lookup."""

    def test_csv_injection_registered(self) -> None:
        """Test csv-injection is available by name."""
        assert get_builtin_rule("csv-injection") is CSV_INJECTION
        assert "csv-injection" in BUILT_IN_RULES

    def test_unknown_rule(self) -> None:
        """Test unknown names raise UnknownRuleError naming the rule."""
        with pytest.raises(UnknownRuleError, match="xss") as exc_info:
            get_builtin_rule("xss")
        assert exc_info.value.name == "xss"
        assert "csv-injection" in str(exc_info.value)

    def test_list_sorted(self) -> None:
        """Test listed names are sorted and complete."""
        names = list_builtin_rules()
        assert names == sorted(BUILT_IN_RULES)
        assert "csv-injection" in names

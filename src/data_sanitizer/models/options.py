"""Per-field, per-schema and global sanitizer options."""

from dataclasses import dataclass, fields
from typing import Optional

from data_sanitizer.models.rule import SanitizerSpec, ValidatorSpec

# Accepted spellings for option keys in YAML / dict configuration.
# camelCase keys match the option names used by schema definitions
# written for document databases.
_KEY_ALIASES = {
    "builtInSanitizers": "builtin_sanitizers",
    "customSanitizers": "custom_sanitizers",
    "builtInValidators": "builtin_validators",
    "customValidators": "custom_validators",
    "skipAll": "skip_all",
    "skipSanitizers": "skip_sanitizers",
    "skipValidators": "skip_validators",
}

_NAME_LIST_KEYS = ("builtin_sanitizers", "builtin_validators")
_FLAG_KEYS = ("skip_all", "skip_sanitizers", "skip_validators")
_CUSTOM_KEYS = ("custom_sanitizers", "custom_validators")


@dataclass(frozen=True)
class SanitizerOptions:
    """One layer of sanitizer options.

    Every attribute is optional; None means the layer does not set it
    and a lower layer (or the default) applies.

    Attributes:
        builtin_sanitizers: Names of built-in rules whose sanitizer to apply.
        custom_sanitizers: Additional sanitizers defined in code.
        builtin_validators: Names of built-in rules whose validator to apply.
        custom_validators: Additional validators defined in code.
        skip_all: Leave the field untouched entirely.
        skip_sanitizers: Do not register sanitizers on the field.
        skip_validators: Do not register validators on the field.
    """

    builtin_sanitizers: Optional[list[str]] = None
    custom_sanitizers: Optional[list[SanitizerSpec]] = None
    builtin_validators: Optional[list[str]] = None
    custom_validators: Optional[list[ValidatorSpec]] = None
    skip_all: Optional[bool] = None
    skip_sanitizers: Optional[bool] = None
    skip_validators: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, object]]) -> "SanitizerOptions":
        """Create options from a dictionary (e.g., from YAML config).

        Args:
            data: Option mapping using snake_case or camelCase keys, or None.

        Returns:
            A new SanitizerOptions instance.

        Raises:
            ValueError: On unknown keys, wrong value types, or custom
                rules (which can only be supplied from Python code).
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Sanitizer options must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        values: dict[str, object] = {}
        for raw_key, value in data.items():
            key = _KEY_ALIASES.get(str(raw_key), str(raw_key))
            if key not in known:
                raise ValueError(f"Unknown sanitizer option: '{raw_key}'")
            if key in _CUSTOM_KEYS:
                raise ValueError(f"'{raw_key}' cannot be set from configuration files")
            if value is None:
                continue
            if key in _NAME_LIST_KEYS:
                if isinstance(value, str):
                    value = [value]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ValueError(f"'{raw_key}' must be a list of rule names")
                values[key] = list(value)
            elif key in _FLAG_KEYS:
                if not isinstance(value, bool):
                    raise ValueError(f"'{raw_key}' must be true or false")
                values[key] = value

        return cls(**values)  # type: ignore[arg-type]

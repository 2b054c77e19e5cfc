"""Sanitizer and validator rule data models."""

from dataclasses import dataclass
from typing import Callable, Optional

# A transform applied to a field value on read (getter) or write (setter)
Transform = Callable[[Optional[str]], Optional[str]]

# A check returning True when the value is acceptable
Predicate = Callable[[Optional[str]], bool]


@dataclass(frozen=True)
class SanitizerSpec:
    """Pair of transforms applied when a value is read out or written in.

    Attributes:
        getter: Transform applied when reading the value, or None.
        setter: Transform applied when writing the value, or None.
    """

    getter: Optional[Transform] = None
    setter: Optional[Transform] = None


@dataclass(frozen=True)
class ValidatorSpec:
    """Predicate plus the message reported when it fails.

    Attributes:
        predicate: Returns True when the value is acceptable.
        message: Human-readable failure message.
    """

    predicate: Predicate
    message: str

    def __iter__(self):
        # Allows `predicate, message = validator`
        return iter((self.predicate, self.message))


@dataclass(frozen=True)
class BuiltInRule:
    """A named rule offering a sanitizing and/or a validating capability.

    Attributes:
        name: Registry name (e.g. "csv-injection").
        sanitizer: Sanitizing capability, if the rule has one.
        validator: Validating capability, if the rule has one.
    """

    name: str
    sanitizer: Optional[SanitizerSpec] = None
    validator: Optional[ValidatorSpec] = None

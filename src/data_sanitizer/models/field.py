"""Schema and field models for records handled by the sanitizer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from data_sanitizer.models.options import SanitizerOptions


class FieldKind(Enum):
    """Kind of value stored in a field."""

    STRING = "string"
    STRING_ARRAY = "string[]"  # List of strings, rules applied per element
    DOCUMENT_ARRAY = "document[]"  # List of sub-records sharing a sub-schema
    OTHER = "other"  # Numbers, dates, booleans: never sanitized


# Type names accepted in schema files
_TYPE_NAMES = {
    "string": FieldKind.STRING,
    "str": FieldKind.STRING,
    "text": FieldKind.STRING,
    "string[]": FieldKind.STRING_ARRAY,
    "document[]": FieldKind.DOCUMENT_ARRAY,
    "number": FieldKind.OTHER,
    "int": FieldKind.OTHER,
    "float": FieldKind.OTHER,
    "decimal": FieldKind.OTHER,
    "boolean": FieldKind.OTHER,
    "bool": FieldKind.OTHER,
    "date": FieldKind.OTHER,
    "datetime": FieldKind.OTHER,
    "other": FieldKind.OTHER,
}

# Keys under which a field or schema carries its sanitizer options
_OPTION_KEYS = ("dataSanitizer", "data_sanitizer", "options")


def _options_from(data: dict[str, object]) -> Optional[SanitizerOptions]:
    for key in _OPTION_KEYS:
        if key in data:
            return SanitizerOptions.from_dict(data[key])  # type: ignore[arg-type]
    return None


def _kind_from_name(type_name: object) -> FieldKind:
    name = str(type_name).strip().lower()
    if name not in _TYPE_NAMES:
        raise ValueError(f"Unknown field type: '{type_name}'")
    return _TYPE_NAMES[name]


@dataclass
class Field:
    """A named field of a schema.

    Attributes:
        name: Field name (record key).
        kind: Kind of value held by the field.
        options: Field-level sanitizer options, if any.
        schema: Sub-schema for DOCUMENT_ARRAY fields.
    """

    name: str
    kind: FieldKind = FieldKind.STRING
    options: Optional[SanitizerOptions] = None
    schema: Optional["Schema"] = None

    def __post_init__(self) -> None:
        if self.kind is FieldKind.DOCUMENT_ARRAY and self.schema is None:
            raise ValueError(f"Field '{self.name}': document arrays require a sub-schema")
        if self.kind is not FieldKind.DOCUMENT_ARRAY and self.schema is not None:
            raise ValueError(f"Field '{self.name}': only document arrays take a sub-schema")

    @property
    def is_handled(self) -> bool:
        """Check if the sanitizer can act on this kind of field."""
        return self.kind is not FieldKind.OTHER

    @property
    def skip_all(self) -> bool:
        """Check if the field opted out of sanitizing and validating."""
        return bool(self.options and self.options.skip_all)

    @classmethod
    def from_dict(cls, name: str, data: object) -> "Field":
        """Create a Field from its schema-file description.

        Accepted shapes:
            "string"                         -> STRING
            ["string"]                       -> STRING_ARRAY
            [{"type": "string"}]             -> STRING_ARRAY (element description)
            [{"title": "string"}]            -> DOCUMENT_ARRAY (implicit sub-schema)
            [{"type": {"type": "string"}}]   -> DOCUMENT_ARRAY with a field named "type"
            {"type": ..., "dataSanitizer": {...}}
            {"type": "document[]", "schema": {"fields": {...}, "options": {...}}}

        Args:
            name: Field name.
            data: Field description.

        Returns:
            A new Field instance.

        Raises:
            ValueError: If the description is malformed.
        """
        options: Optional[SanitizerOptions] = None
        type_spec = data
        sub_schema_data: object = None

        if isinstance(data, dict):
            if "type" not in data:
                raise ValueError(f"Field '{name}': missing 'type'")
            type_spec = data["type"]
            options = _options_from(data)
            sub_schema_data = data.get("schema")

        if isinstance(type_spec, list):
            if len(type_spec) != 1:
                raise ValueError(f"Field '{name}': array type must have exactly one element type")
            element = type_spec[0]
            is_element_description = (
                isinstance(element, dict)
                and "type" in element
                and not isinstance(element["type"], dict)
            )
            if is_element_description:
                # [{"type": "string", ...}] describes the elements, not a sub-schema
                inner = cls.from_dict(name, element)
                if inner.kind is FieldKind.STRING:
                    return cls(name=name, kind=FieldKind.STRING_ARRAY, options=options or inner.options)
                return cls(name=name, kind=FieldKind.OTHER, options=options or inner.options)
            if isinstance(element, dict):
                return cls(
                    name=name,
                    kind=FieldKind.DOCUMENT_ARRAY,
                    options=options,
                    schema=Schema.from_dict({"fields": element}),
                )
            if _kind_from_name(element) is FieldKind.STRING:
                return cls(name=name, kind=FieldKind.STRING_ARRAY, options=options)
            return cls(name=name, kind=FieldKind.OTHER, options=options)

        kind = _kind_from_name(type_spec)
        schema = None
        if kind is FieldKind.DOCUMENT_ARRAY:
            if not isinstance(sub_schema_data, dict):
                raise ValueError(f"Field '{name}': document arrays require a 'schema' mapping")
            schema = Schema.from_dict(sub_schema_data)
        return cls(name=name, kind=kind, options=options, schema=schema)


@dataclass
class Schema:
    """Ordered collection of fields plus schema-level sanitizer options.

    Attributes:
        fields: Mapping of field name to Field, in declaration order.
        options: Schema-level sanitizer options, if any.
    """

    fields: dict[str, Field] = field(default_factory=dict)
    options: Optional[SanitizerOptions] = None

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields.values())

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> Optional[Field]:
        """Get a field by name, or None."""
        return self.fields.get(name)

    @classmethod
    def from_fields(cls, *fields: Field, options: Optional[SanitizerOptions] = None) -> "Schema":
        """Create a Schema from Field objects."""
        return cls(fields={f.name: f for f in fields}, options=options)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Schema":
        """Create a Schema from a dictionary (e.g., from YAML config).

        Args:
            data: Mapping with a 'fields' mapping and optional options.

        Returns:
            A new Schema instance.

        Raises:
            ValueError: If the description is malformed.
        """
        raw_fields = data.get("fields")
        if not isinstance(raw_fields, dict):
            raise ValueError("Schema 'fields' must be a mapping of field name to type")

        return cls(
            fields={str(name): Field.from_dict(str(name), spec) for name, spec in raw_fields.items()},
            options=_options_from(data),
        )

"""Attach built-in and custom rules to the fields of a schema."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from data_sanitizer.builtin import get_builtin_rule
from data_sanitizer.config import resolve_options
from data_sanitizer.models.field import Field, FieldKind, Schema
from data_sanitizer.models.options import SanitizerOptions
from data_sanitizer.models.rule import SanitizerSpec, Transform, ValidatorSpec
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)

RulePart = Union[SanitizerSpec, ValidatorSpec]


@dataclass
class FieldPipeline:
    """Transforms and validators registered on one field.

    For STRING_ARRAY fields getters and setters act on each element,
    while validators receive the whole list.

    Attributes:
        definition: The field the pipeline belongs to.
        getters: Transforms applied on read, in registration order.
        setters: Transforms applied on write, in registration order.
        validators: Validators checked on validation.
        sub_pipeline: Pipeline for the elements of a DOCUMENT_ARRAY field.
    """

    definition: Field
    getters: list[Transform] = field(default_factory=list)
    setters: list[Transform] = field(default_factory=list)
    validators: list[ValidatorSpec] = field(default_factory=list)
    sub_pipeline: Optional["SchemaPipeline"] = None

    @property
    def is_empty(self) -> bool:
        """Check if nothing is registered on the field."""
        if self.sub_pipeline is not None:
            return all(p.is_empty for p in self.sub_pipeline)
        return not (self.getters or self.setters or self.validators)


@dataclass
class SchemaPipeline:
    """Field pipelines for every handled field of a schema."""

    schema: Schema
    fields: dict[str, FieldPipeline] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.fields.values())

    def get(self, name: str) -> Optional[FieldPipeline]:
        """Get the pipeline of a field, or None if the field is not handled."""
        return self.fields.get(name)

    @property
    def has_validators(self) -> bool:
        """Check if any field, nested ones included, has a validator."""
        for pipeline in self:
            if pipeline.sub_pipeline is not None:
                if pipeline.sub_pipeline.has_validators:
                    return True
            elif pipeline.validators:
                return True
        return False


def build_rule_list(
    attribute: str,
    builtin_names: Sequence[str],
    custom: Sequence[RulePart],
) -> list[RulePart]:
    """Collect one capability of the named built-ins followed by custom rules.

    Built-in rules lacking the requested capability are skipped.

    Args:
        attribute: Capability to collect ("sanitizer" or "validator").
        builtin_names: Names of built-in rules.
        custom: Custom rule parts appended after the built-ins.

    Returns:
        List of rule parts.

    Raises:
        UnknownRuleError: If a built-in name is not registered.
    """
    parts: list[RulePart] = []
    for name in builtin_names:
        part = getattr(get_builtin_rule(name), attribute)
        if part is not None:
            parts.append(part)
    parts.extend(custom)
    return parts


def build_validator(target: Field, validator: ValidatorSpec) -> ValidatorSpec:
    """Adapt a validator to the kind of field it is registered on.

    String arrays pass only if every string element passes.

    Args:
        target: Field the validator is registered on.
        validator: Validator written for a single string.

    Returns:
        The validator to register.
    """
    if target.kind is not FieldKind.STRING_ARRAY:
        return validator

    predicate = validator.predicate

    def every(values: object) -> bool:
        return all(predicate(v) for v in values if isinstance(v, str))  # type: ignore[attr-defined]

    return ValidatorSpec(predicate=every, message=validator.message)  # type: ignore[arg-type]


def _build_field_pipeline(
    target: Field,
    schema: Schema,
    options: Optional[SanitizerOptions],
) -> FieldPipeline:
    resolved = resolve_options(target.options, schema.options, options)
    pipeline = FieldPipeline(definition=target)

    if not resolved.skip_sanitizers:
        sanitizers = build_rule_list(
            "sanitizer", resolved.builtin_sanitizers, resolved.custom_sanitizers
        )
        for sanitizer in sanitizers:
            if sanitizer.getter:  # type: ignore[union-attr]
                pipeline.getters.append(sanitizer.getter)  # type: ignore[union-attr]
            if sanitizer.setter:  # type: ignore[union-attr]
                pipeline.setters.append(sanitizer.setter)  # type: ignore[union-attr]

    if not resolved.skip_validators:
        validators = build_rule_list(
            "validator", resolved.builtin_validators, resolved.custom_validators
        )
        for validator in validators:
            pipeline.validators.append(build_validator(target, validator))  # type: ignore[arg-type]

    logger.debug(
        f"Field '{target.name}': {len(pipeline.getters)} getters, "
        f"{len(pipeline.setters)} setters, {len(pipeline.validators)} validators"
    )
    return pipeline


def apply_sanitizer_plugin(
    schema: Schema,
    options: Optional[SanitizerOptions] = None,
) -> SchemaPipeline:
    """Build the rule pipelines for every handled field of a schema.

    Fields of kind OTHER and fields with skip_all are left out.
    Document arrays are handled recursively: their sub-schema is
    processed with the same plugin options.

    Args:
        schema: Schema to process.
        options: Plugin-level (global) options.

    Returns:
        SchemaPipeline with one entry per handled field.

    Raises:
        UnknownRuleError: If options name an unregistered built-in rule.
    """
    result = SchemaPipeline(schema=schema)

    for target in schema:
        if not target.is_handled:
            continue
        if target.skip_all:
            logger.debug(f"Field '{target.name}': skipped (skip_all)")
            continue

        if target.kind is FieldKind.DOCUMENT_ARRAY:
            result.fields[target.name] = FieldPipeline(
                definition=target,
                sub_pipeline=apply_sanitizer_plugin(target.schema, options),  # type: ignore[arg-type]
            )
            continue

        result.fields[target.name] = _build_field_pipeline(target, schema, options)

    return result

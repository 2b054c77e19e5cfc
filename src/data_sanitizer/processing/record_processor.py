"""Apply schema pipelines to plain dict records."""

from dataclasses import dataclass
from typing import Optional

from data_sanitizer.models.field import FieldKind
from data_sanitizer.models.rule import Transform
from data_sanitizer.plugin import FieldPipeline, SchemaPipeline
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)

Record = dict[str, object]


@dataclass(frozen=True)
class ValidationIssue:
    """A single failed validator.

    Attributes:
        path: Dotted path to the value (e.g. "items.0.title").
        message: Failure message of the validator.
        value: The offending value.
    """

    path: str
    message: str
    value: object = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationError(Exception):
    """Exception raised when a record fails one or more validators."""

    def __init__(self, issues: list[ValidationIssue]):
        """Initialize ValidationError.

        Args:
            issues: The failures, in field order.
        """
        self.issues = issues
        super().__init__("Validation failed: " + ", ".join(str(i) for i in issues))


def _is_text(value: object) -> bool:
    return value is None or isinstance(value, str)


def _apply_transforms(transforms: list[Transform], value: object) -> object:
    for transform in transforms:
        value = transform(value)  # type: ignore[arg-type]
    return value


class RecordProcessor:
    """Runs the getters, setters and validators of a SchemaPipeline on records.

    Records are plain dicts. Keys without a pipeline are copied as-is,
    and input records are never mutated.
    """

    def __init__(self, pipeline: SchemaPipeline):
        """Initialize record processor.

        Args:
            pipeline: Pipeline built by apply_sanitizer_plugin.
        """
        self.pipeline = pipeline

    def write(self, record: Record) -> Record:
        """Apply setters, as when a record is written in.

        Args:
            record: Input record.

        Returns:
            New record with setters applied.
        """
        return self._transform(self.pipeline, record, "setters")

    def read(self, record: Record) -> Record:
        """Apply getters, as when a record is read back out.

        Args:
            record: Stored record.

        Returns:
            New record with getters applied.
        """
        return self._transform(self.pipeline, record, "getters")

    def validate(self, record: Record) -> list[ValidationIssue]:
        """Run every validator on the record.

        Absent, None and non-string values are not validated; string
        arrays are only validated when the value is a list.

        Args:
            record: Record to check.

        Returns:
            List of issues, empty if the record is valid.
        """
        issues: list[ValidationIssue] = []
        self._collect_issues(self.pipeline, record, "", issues)
        return issues

    def check(self, record: Record) -> None:
        """Validate the record and raise on failure.

        Raises:
            ValidationError: If any validator fails.
        """
        issues = self.validate(record)
        if issues:
            raise ValidationError(issues)

    def process(self, record: Record, validate: bool = True) -> Record:
        """Write a record: apply setters, then validate the result.

        Args:
            record: Input record.
            validate: Whether to run validators after the setters.

        Returns:
            The record with setters applied.

        Raises:
            ValidationError: If validation is enabled and fails.
        """
        written = self.write(record)
        if validate:
            self.check(written)
        return written

    def _transform(self, pipeline: SchemaPipeline, record: Record, attr: str) -> Record:
        result = dict(record)
        for name, field_pipeline in pipeline.fields.items():
            if name not in result:
                continue
            result[name] = self._transform_value(field_pipeline, result[name], attr)
        return result

    def _transform_value(self, field_pipeline: FieldPipeline, value: object, attr: str) -> object:
        kind = field_pipeline.definition.kind

        if kind is FieldKind.DOCUMENT_ARRAY:
            if not isinstance(value, list):
                return value
            sub = field_pipeline.sub_pipeline
            return [
                self._transform(sub, item, attr) if isinstance(item, dict) else item  # type: ignore[arg-type]
                for item in value
            ]

        transforms: list[Transform] = getattr(field_pipeline, attr)
        if not transforms:
            return value

        if kind is FieldKind.STRING_ARRAY:
            if not isinstance(value, list):
                return value
            return [
                _apply_transforms(transforms, item) if _is_text(item) else item
                for item in value
            ]

        if not _is_text(value):
            return value
        return _apply_transforms(transforms, value)

    def _collect_issues(
        self,
        pipeline: SchemaPipeline,
        record: Record,
        prefix: str,
        issues: list[ValidationIssue],
    ) -> None:
        for name, field_pipeline in pipeline.fields.items():
            value = record.get(name)
            if value is None:
                continue
            path = f"{prefix}{name}"

            if field_pipeline.definition.kind is FieldKind.DOCUMENT_ARRAY:
                if not isinstance(value, list):
                    continue
                for index, item in enumerate(value):
                    if isinstance(item, dict):
                        self._collect_issues(
                            field_pipeline.sub_pipeline,  # type: ignore[arg-type]
                            item,
                            f"{path}.{index}.",
                            issues,
                        )
                continue

            if field_pipeline.definition.kind is FieldKind.STRING_ARRAY:
                if not isinstance(value, list):
                    continue
            elif not isinstance(value, str):
                # Numbers and other scalars are never formula text
                continue

            for validator in field_pipeline.validators:
                if not validator.predicate(value):  # type: ignore[arg-type]
                    logger.debug(f"Validator failed on '{path}': {validator.message}")
                    issues.append(ValidationIssue(path=path, message=validator.message, value=value))


def process_records(
    pipeline: SchemaPipeline,
    records: list[Record],
    validate: bool = False,
) -> tuple[list[Record], list[tuple[int, ValidationIssue]]]:
    """Write a batch of records and collect validation issues.

    Unlike RecordProcessor.process, failures do not stop the batch.

    Args:
        pipeline: Pipeline built by apply_sanitizer_plugin.
        records: Records to write.
        validate: Whether to validate each written record.

    Returns:
        Tuple of (written records, list of (record index, issue)).
    """
    processor = RecordProcessor(pipeline)
    written: list[Record] = []
    issues: list[tuple[int, ValidationIssue]] = []

    for index, record in enumerate(records):
        result = processor.write(record)
        written.append(result)
        if validate:
            issues.extend((index, issue) for issue in processor.validate(result))

    changed = sum(1 for before, after in zip(records, written) if before != after)
    logger.info(f"Processed {len(records)} records ({changed} changed, {len(issues)} issues)")
    return written, issues


def find_pipeline_issues(pipeline: SchemaPipeline, records: list[Record]) -> Optional[str]:
    """Describe why a pipeline would do nothing for the given records.

    Returns:
        A warning message, or None if at least one record key is handled.
    """
    if all(p.is_empty for p in pipeline):
        return "No sanitizers or validators are enabled for any field"
    keys = {key for record in records for key in record}
    if records and not keys.intersection(pipeline.fields):
        return "None of the record columns match a handled schema field"
    return None

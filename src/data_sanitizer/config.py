"""Configuration loading and option resolution for the data sanitizer."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from data_sanitizer.models.field import Schema
from data_sanitizer.models.options import SanitizerOptions
from data_sanitizer.models.rule import SanitizerSpec, ValidatorSpec
from data_sanitizer.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


@dataclass
class ResolvedOptions:
    """Effective sanitizer options for a single field.

    Attributes:
        builtin_sanitizers: Built-in rule names whose sanitizer applies.
        custom_sanitizers: Custom sanitizers to apply after the built-ins.
        builtin_validators: Built-in rule names whose validator applies.
        custom_validators: Custom validators to apply after the built-ins.
        skip_all: Field is left untouched.
        skip_sanitizers: No sanitizers are registered.
        skip_validators: No validators are registered.
    """

    builtin_sanitizers: list[str] = field(default_factory=list)
    custom_sanitizers: list[SanitizerSpec] = field(default_factory=list)
    builtin_validators: list[str] = field(default_factory=list)
    custom_validators: list[ValidatorSpec] = field(default_factory=list)
    skip_all: bool = False
    skip_sanitizers: bool = False
    skip_validators: bool = False


def _first_set(attr: str, *layers: Optional[SanitizerOptions]) -> list:
    for layer in layers:
        if layer is None:
            continue
        value = getattr(layer, attr)
        if value is not None:
            return list(value)
    return []


def resolve_options(
    field_options: Optional[SanitizerOptions] = None,
    schema_options: Optional[SanitizerOptions] = None,
    global_options: Optional[SanitizerOptions] = None,
) -> ResolvedOptions:
    """Resolve the effective options of a field from three layers.

    Rule lists come from the most specific layer that sets them
    (field, then schema, then global). An explicitly empty list counts
    as set. Skip flags are only honoured on the field itself.

    Args:
        field_options: Options declared on the field.
        schema_options: Options declared on the enclosing schema.
        global_options: Options passed when applying the plugin.

    Returns:
        ResolvedOptions with concrete values.
    """
    layers = (field_options, schema_options, global_options)
    own = field_options or SanitizerOptions()

    return ResolvedOptions(
        builtin_sanitizers=_first_set("builtin_sanitizers", *layers),
        custom_sanitizers=_first_set("custom_sanitizers", *layers),
        builtin_validators=_first_set("builtin_validators", *layers),
        custom_validators=_first_set("custom_validators", *layers),
        skip_all=bool(own.skip_all),
        skip_sanitizers=bool(own.skip_sanitizers),
        skip_validators=bool(own.skip_validators),
    )


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        format: Default output format when the output path has no
            recognised suffix (csv or xlsx).
        delimiter: Delimiter for CSV output.
        sheet_name: Worksheet name for Excel output.
    """

    format: str = "csv"
    delimiter: str = ","
    sheet_name: str = "Sanitized"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        output_format = str(data.get("format", "csv")).lower()
        if output_format not in ("csv", "xlsx"):
            raise ConfigError(f"Unsupported output format: '{output_format}'")
        return cls(
            format=output_format,
            delimiter=str(data.get("delimiter", ",")),
            sheet_name=str(data.get("sheet_name", "Sanitized")),
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "data_sanitizer.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "data_sanitizer.log")),
        )


@dataclass
class AppConfig:
    """Main configuration container.

    Attributes:
        global_options: Plugin-level sanitizer options (lowest layer).
        output: Output generation configuration.
        logging: Logging configuration.
    """

    global_options: SanitizerOptions = field(default_factory=SanitizerOptions)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If file is invalid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not content:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def load_schema(path: Path) -> Schema:
    """Load a record schema from a YAML file.

    Args:
        path: Path to the schema file.

    Returns:
        Parsed Schema.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the schema is malformed.
    """
    data = load_yaml_file(path)
    try:
        schema = Schema.from_dict(data)
    except ValueError as e:
        raise ConfigError(f"Invalid schema in {path}: {e}") from e

    logger.info(f"Loaded schema with {len(schema)} fields from {path}")
    return schema


def load_settings(path: Path) -> AppConfig:
    """Load settings from settings.yaml.

    Args:
        path: Path to settings.yaml.

    Returns:
        AppConfig built from the file.

    Raises:
        ConfigError: If a section is malformed.
    """
    data = load_yaml_file(path)
    config = AppConfig()

    if "sanitizer" in data:
        try:
            config.global_options = SanitizerOptions.from_dict(data["sanitizer"])  # type: ignore[arg-type]
        except ValueError as e:
            raise ConfigError(f"Invalid 'sanitizer' section in {path}: {e}") from e

    if "output" in data:
        config.output = OutputConfig.from_dict(data["output"])  # type: ignore[arg-type]

    if "logging" in data:
        config.logging = LoggingConfig.from_dict(data["logging"])  # type: ignore[arg-type]

    return config


def load_config(settings_path: Optional[Path] = None, config_dir: Optional[Path] = None) -> AppConfig:
    """Load application configuration.

    A missing settings file is not an error; defaults are used.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete AppConfig object.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    if settings_path.exists():
        config = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
    else:
        config = AppConfig()
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    return config

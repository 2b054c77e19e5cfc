"""Command-line interface for the data sanitizer."""

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_sanitizer import __version__
from data_sanitizer.builtin import UnknownRuleError, get_builtin_rule, list_builtin_rules
from data_sanitizer.config import AppConfig, ConfigError, load_config, load_schema
from data_sanitizer.models.field import Schema
from data_sanitizer.models.options import SanitizerOptions
from data_sanitizer.utils.logging_config import LogContext, get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

DEFAULT_RULE = "csv-injection"

# Maximum number of issues printed before truncating
MAX_DISPLAYED_ISSUES = 50


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="data-sanitizer",
        description="Sanitize or validate CSV data against spreadsheet formula injection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s contacts.csv
  %(prog)s contacts.csv -o clean/contacts.xlsx
  %(prog)s contacts.csv --check
  %(prog)s contacts.csv --schema config/schema.yaml --validate csv-injection
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="CSV file to process",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output file (.csv or .xlsx, default: <input>_sanitized.csv)",
    )

    parser.add_argument(
        "--schema",
        type=Path,
        default=None,
        help="Schema YAML describing the fields (default: every column is a string)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    # Rule selection
    rules_group = parser.add_argument_group("Rules")
    rules_group.add_argument(
        "--sanitize",
        action="append",
        default=None,
        metavar="RULE",
        help=f"Built-in rule whose sanitizer to apply (repeatable, default: {DEFAULT_RULE})",
    )
    rules_group.add_argument(
        "--validate",
        action="append",
        default=None,
        metavar="RULE",
        help="Built-in rule whose validator to apply (repeatable)",
    )
    rules_group.add_argument(
        "--list-rules",
        action="store_true",
        help="List built-in rules and exit",
    )

    # Modes
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the input; exit 1 if any value fails",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration and schema files only",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def generate_default_output_path(input_path: Path, output_format: str = "csv") -> Path:
    """Generate the default output path next to the input file.

    Returns:
        Path with format <dir>/<stem>_sanitized.<format>
    """
    return input_path.with_name(f"{input_path.stem}_sanitized.{output_format}")


def build_global_options(args: argparse.Namespace, config: AppConfig) -> SanitizerOptions:
    """Combine settings-file options with command-line rule flags.

    Command-line flags replace the corresponding settings. --check runs
    validators on the raw input, so it uses the default validator unless
    validators are selected. Otherwise the default sanitizer is used when
    no rule of either kind is selected.

    Args:
        args: Parsed command-line arguments.
        config: Loaded application configuration.

    Returns:
        Plugin-level SanitizerOptions.
    """
    options = config.global_options

    if args.sanitize is not None:
        options = dataclasses.replace(options, builtin_sanitizers=list(args.sanitize))
    if args.validate is not None:
        options = dataclasses.replace(options, builtin_validators=list(args.validate))

    if args.check:
        if options.builtin_validators is None:
            options = dataclasses.replace(options, builtin_validators=[DEFAULT_RULE])
    elif options.builtin_sanitizers is None and options.builtin_validators is None:
        options = dataclasses.replace(options, builtin_sanitizers=[DEFAULT_RULE])

    return options


def list_rules_command() -> int:
    """Print the registered built-in rules.

    Returns:
        Exit code 0.
    """
    table = Table(title="Built-in rules")
    table.add_column("Name", style="bold")
    table.add_column("Sanitizer")
    table.add_column("Validator message")

    for name in list_builtin_rules():
        rule = get_builtin_rule(name)
        table.add_row(
            name,
            "yes" if rule.sanitizer else "no",
            rule.validator.message if rule.validator else "-",
        )

    console.print(table)
    return 0


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and schema files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    from data_sanitizer.plugin import apply_sanitizer_plugin

    console.print("[bold]Validating configuration files...[/bold]\n")

    errors: list[str] = []
    warnings: list[str] = []

    settings_path = args.config or (args.config_dir / "settings.yaml")
    if settings_path.exists():
        console.print(f"[green]✓[/green] Settings: {settings_path}")
    else:
        warnings.append(f"Settings file not found: {settings_path}")

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
        options = build_global_options(args, config)
    except (FileNotFoundError, ConfigError) as e:
        errors.append(f"Failed to load configuration: {e}")
        options = None

    if args.schema is not None and options is not None:
        try:
            schema = load_schema(args.schema)
            pipeline = apply_sanitizer_plugin(schema, options)
            console.print(f"[green]✓[/green] Schema: {args.schema}")
            console.print(f"  - {len(schema)} fields")
            console.print(f"  - {len(pipeline.fields)} handled fields")
        except (FileNotFoundError, ConfigError, UnknownRuleError) as e:
            errors.append(f"Failed to load schema: {e}")
    elif options is not None:
        for name in (options.builtin_sanitizers or []) + (options.builtin_validators or []):
            try:
                get_builtin_rule(name)
            except UnknownRuleError as e:
                errors.append(str(e))

    if warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in warnings:
            console.print(f"  - {w}")

    if errors:
        console.print("\n[red]Errors:[/red]")
        for err in errors:
            console.print(f"  - {err}")
        return 1

    console.print("\n[green]Configuration is valid.[/green]")
    return 0


def display_issues(issues: list) -> None:
    """Print validation issues as a table.

    Args:
        issues: List of (row index, ValidationIssue) tuples.
    """
    table = Table(title=f"Validation failures ({len(issues)})")
    table.add_column("Row", justify="right")
    table.add_column("Field")
    table.add_column("Message")
    table.add_column("Value", overflow="fold")

    for index, issue in issues[:MAX_DISPLAYED_ISSUES]:
        # Row numbers as seen in a spreadsheet: header is row 1
        table.add_row(str(index + 2), escape(issue.path), escape(issue.message), escape(repr(issue.value)))

    console.print(table)
    if len(issues) > MAX_DISPLAYED_ISSUES:
        console.print(f"  ... and {len(issues) - MAX_DISPLAYED_ISSUES} more")


def count_changed_cells(
    headers: list[str],
    before: list[dict[str, object]],
    after: list[dict[str, object]],
) -> int:
    """Count cells whose value differs between two row lists."""
    return sum(
        1
        for old, new in zip(before, after)
        for h in headers
        if old.get(h) != new.get(h)
    )


def run(args: argparse.Namespace, config: AppConfig) -> int:
    """Check or sanitize the input file.

    Args:
        args: Parsed command-line arguments.
        config: Loaded application configuration.

    Returns:
        Exit code (0 for success, 1 for errors or validation failures).
    """
    from data_sanitizer.output import CSVExporter, ExcelWriter
    from data_sanitizer.parsers import ParseError, infer_schema, read_csv
    from data_sanitizer.plugin import apply_sanitizer_plugin
    from data_sanitizer.processing import RecordProcessor, find_pipeline_issues, process_records

    try:
        with console.status("[bold green]Reading input..."):
            table = read_csv(args.input)
        schema: Schema = load_schema(args.schema) if args.schema else infer_schema(table.headers)
        options = build_global_options(args, config)
        pipeline = apply_sanitizer_plugin(schema, options)
    except (FileNotFoundError, ParseError, ConfigError, UnknownRuleError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    console.print(f"Read {len(table.rows)} rows, {len(table.headers)} columns from {args.input}")

    warning = find_pipeline_issues(pipeline, table.rows)
    if warning:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if args.check:
        if not pipeline.has_validators:
            console.print("[red]Error: --check needs at least one validator (see --validate)[/red]")
            return 1
        processor = RecordProcessor(pipeline)
        with LogContext(logger, "check", input=str(args.input)):
            issues = [
                (index, issue)
                for index, row in enumerate(table.rows)
                for issue in processor.validate(row)
            ]
        if issues:
            display_issues(issues)
            return 1
        console.print("[green]No unsafe values found.[/green]")
        return 0

    with LogContext(logger, "sanitize", input=str(args.input)):
        written, issues = process_records(pipeline, table.rows, validate=True)

    if issues:
        display_issues(issues)
        console.print("[red]Output not written: validation failed.[/red]")
        return 1

    output_path = args.output
    if output_path is None:
        output_path = generate_default_output_path(args.input, config.output.format)
        console.print(f"[dim]Using default output: {output_path}[/dim]")

    output_format = output_path.suffix.lower().lstrip(".")
    if output_format not in ("csv", "xlsx"):
        output_format = config.output.format

    if output_format == "xlsx":
        ExcelWriter(config.output).write(output_path, table.headers, written)
    else:
        CSVExporter(config.output).export(output_path, table.headers, written)

    changed = count_changed_cells(table.headers, table.rows, written)
    console.print(f"[green]Sanitized {changed} cells, wrote {output_path}[/green]")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Argument list (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.list_rules:
        return list_rules_command()

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return 1

    log_level = get_log_level(args.verbose) if args.verbose else config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file, console_output=args.verbose > 0)

    if args.validate_only:
        return validate_config(args)

    if args.input is None:
        console.print("[red]Error: an input file is required[/red]")
        parser.print_usage()
        return 1

    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())

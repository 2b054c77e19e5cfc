"""Tests for the command-line interface."""

import csv
from pathlib import Path

import pytest
from openpyxl import load_workbook

from data_sanitizer.cli import (
    build_global_options,
    create_parser,
    generate_default_output_path,
    get_log_level,
    main,
)
from data_sanitizer.config import AppConfig
from data_sanitizer.models.options import SanitizerOptions


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each CLI test from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def contacts_csv(workdir: Path) -> Path:
    path = workdir / "contacts.csv"
    path.write_text(
        'name,email,note\n'
        'Alice,alice@example.com,"=HYPERLINK(""http://evil.xyz"")"\n'
        'Bob,bob@example.com,+1+1\n'
        'Carol,carol@example.com,hello\n',
        encoding="utf-8",
    )
    return path


def read_rows(path: Path) -> list[list[str]]:
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestHelpers:
    """Tests for CLI helper functions."""

    def test_log_level(self) -> None:
        """Test verbosity maps to log levels."""
        assert get_log_level(0) == "WARNING"
        assert get_log_level(1) == "INFO"
        assert get_log_level(2) == "DEBUG"
        assert get_log_level(5) == "DEBUG"

    def test_default_output_path(self) -> None:
        """Test the default output sits next to the input."""
        assert generate_default_output_path(Path("in/contacts.csv")) == Path("in/contacts_sanitized.csv")
        assert generate_default_output_path(Path("a.csv"), "xlsx") == Path("a_sanitized.xlsx")

    def test_default_rule_for_sanitize_mode(self) -> None:
        """Test the sanitizer defaults to csv-injection."""
        args = create_parser().parse_args(["in.csv"])
        options = build_global_options(args, AppConfig())
        assert options.builtin_sanitizers == ["csv-injection"]
        assert options.builtin_validators is None

    def test_default_rule_for_check_mode(self) -> None:
        """Test --check defaults to the csv-injection validator."""
        args = create_parser().parse_args(["in.csv", "--check"])
        options = build_global_options(args, AppConfig())
        assert options.builtin_validators == ["csv-injection"]
        assert options.builtin_sanitizers is None

    def test_check_mode_default_with_sanitizer_settings(self) -> None:
        """Test --check adds the default validator when settings only name sanitizers."""
        config = AppConfig(global_options=SanitizerOptions(builtin_sanitizers=["csv-injection"]))
        args = create_parser().parse_args(["in.csv", "--check"])
        options = build_global_options(args, config)
        assert options.builtin_validators == ["csv-injection"]
        assert options.builtin_sanitizers == ["csv-injection"]

    def test_check_mode_keeps_explicit_empty_validators(self) -> None:
        """Test an explicit empty validator list is not replaced by the default."""
        config = AppConfig(global_options=SanitizerOptions(builtin_validators=[]))
        args = create_parser().parse_args(["in.csv", "--check"])
        assert build_global_options(args, config).builtin_validators == []

    def test_flags_override_settings(self) -> None:
        """Test command-line rules replace settings-file rules."""
        config = AppConfig(global_options=SanitizerOptions(builtin_sanitizers=["other"]))
        args = create_parser().parse_args(["in.csv", "--sanitize", "csv-injection"])
        assert build_global_options(args, config).builtin_sanitizers == ["csv-injection"]

    def test_settings_kept_without_flags(self) -> None:
        """Test settings-file rules are used when no flag is given."""
        config = AppConfig(global_options=SanitizerOptions(builtin_validators=["csv-injection"]))
        args = create_parser().parse_args(["in.csv"])
        options = build_global_options(args, config)
        assert options.builtin_validators == ["csv-injection"]
        assert options.builtin_sanitizers is None


class TestSanitizeCommand:
    """Tests for the default sanitize mode."""

    def test_sanitize_to_default_output(self, contacts_csv: Path, workdir: Path) -> None:
        """Test unsafe cells are neutralized in the default output file."""
        assert main([str(contacts_csv)]) == 0

        rows = read_rows(workdir / "contacts_sanitized.csv")
        assert rows[0] == ["name", "email", "note"]
        assert rows[1][2] == '\'=HYPERLINK("http://evil.xyz")'
        assert rows[2][2] == "'+1+1"
        assert rows[3] == ["Carol", "carol@example.com", "hello"]

    def test_sanitize_to_xlsx(self, contacts_csv: Path, workdir: Path) -> None:
        """Test .xlsx output is written with sanitized values."""
        output_path = workdir / "out" / "clean.xlsx"

        assert main([str(contacts_csv), "-o", str(output_path)]) == 0

        ws = load_workbook(output_path).active
        assert ws["C3"].value == "'+1+1"

    def test_xlsx_with_control_characters(self, workdir: Path) -> None:
        """Test control characters in the input do not break .xlsx output."""
        path = workdir / "bell.csv"
        path.write_text("name,note\nAlice,bell\x07x\n", encoding="utf-8")
        output_path = workdir / "bell.xlsx"

        assert main([str(path), "-o", str(output_path)]) == 0

        assert load_workbook(output_path).active["B2"].value == "bellx"

    def test_schema_skip_all(self, contacts_csv: Path, workdir: Path) -> None:
        """Test a schema can exclude a column from sanitizing."""
        schema_path = workdir / "schema.yaml"
        schema_path.write_text(
            "fields:\n"
            "  name: string\n"
            "  email: string\n"
            "  note:\n"
            "    type: string\n"
            "    dataSanitizer:\n"
            "      skipAll: true\n",
            encoding="utf-8",
        )
        output_path = workdir / "clean.csv"

        assert main([str(contacts_csv), "--schema", str(schema_path), "-o", str(output_path)]) == 0

        assert read_rows(output_path)[2][2] == "+1+1"

    def test_sanitize_and_validate(self, contacts_csv: Path, workdir: Path) -> None:
        """Test sanitized values pass validators on the write path."""
        output_path = workdir / "clean.csv"

        result = main([
            str(contacts_csv), "--sanitize", "csv-injection",
            "--validate", "csv-injection", "-o", str(output_path),
        ])

        assert result == 0
        assert output_path.exists()

    def test_validation_failure_blocks_output(
        self, contacts_csv: Path, workdir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test failing validators stop the output from being written."""
        output_path = workdir / "clean.csv"

        result = main([str(contacts_csv), "--validate", "csv-injection", "-o", str(output_path)])

        assert result == 1
        assert not output_path.exists()
        assert "Output not written" in capsys.readouterr().out

    def test_unknown_rule(self, contacts_csv: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an unknown rule name is reported as an error."""
        assert main([str(contacts_csv), "--sanitize", "xss"]) == 1
        assert "Unknown built-in rule" in capsys.readouterr().out

    def test_missing_input(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing input file is reported as an error."""
        assert main([str(workdir / "missing.csv")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_no_input(self, workdir: Path) -> None:
        """Test the input argument is required outside listing modes."""
        assert main([]) == 1


class TestCheckCommand:
    """Tests for --check."""

    def test_check_reports_unsafe(self, contacts_csv: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test unsafe values fail the check with a non-zero exit."""
        assert main([str(contacts_csv), "--check"]) == 1
        out = capsys.readouterr().out
        assert "Validation failures (2)" in out
        assert "note" in out

    def test_check_clean(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test clean input passes the check."""
        path = workdir / "clean.csv"
        path.write_text("name\nAlice\nBob\n", encoding="utf-8")
        assert main([str(path), "--check"]) == 0
        assert "No unsafe values" in capsys.readouterr().out

    def test_check_does_not_write(self, contacts_csv: Path, workdir: Path) -> None:
        """Test --check never writes an output file."""
        main([str(contacts_csv), "--check"])
        assert not (workdir / "contacts_sanitized.csv").exists()

    def test_check_with_sanitizer_only_settings(
        self, contacts_csv: Path, workdir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test settings that only enable sanitizers still fail on unsafe values."""
        config_dir = workdir / "config"
        config_dir.mkdir()
        (config_dir / "settings.yaml").write_text(
            "sanitizer:\n  builtInSanitizers: [csv-injection]\n", encoding="utf-8"
        )

        assert main([str(contacts_csv), "--check"]) == 1
        assert "Validation failures (2)" in capsys.readouterr().out

    def test_check_without_validators(
        self, contacts_csv: Path, workdir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test --check refuses to pass when every validator is disabled."""
        config_dir = workdir / "config"
        config_dir.mkdir()
        (config_dir / "settings.yaml").write_text(
            "sanitizer:\n  builtInSanitizers: [csv-injection]\n  builtInValidators: []\n",
            encoding="utf-8",
        )

        assert main([str(contacts_csv), "--check"]) == 1
        out = capsys.readouterr().out
        assert "at least one validator" in out
        assert "No unsafe values" not in out


class TestInfoCommands:
    """Tests for --list-rules and --validate-only."""

    def test_list_rules(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test built-in rules are listed."""
        assert main(["--list-rules"]) == 0
        assert "csv-injection" in capsys.readouterr().out

    def test_validate_only_defaults(self, workdir: Path) -> None:
        """Test validation passes with no config files present."""
        assert main(["--validate-only"]) == 0

    def test_validate_only_schema(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a valid schema is reported with its field counts."""
        schema_path = workdir / "schema.yaml"
        schema_path.write_text("fields:\n  name: string\n  age: number\n", encoding="utf-8")
        assert main(["--validate-only", "--schema", str(schema_path)]) == 0
        assert "1 handled fields" in capsys.readouterr().out

    def test_validate_only_bad_schema(self, workdir: Path) -> None:
        """Test an invalid schema fails validation."""
        schema_path = workdir / "schema.yaml"
        schema_path.write_text("fields:\n  name: blob\n", encoding="utf-8")
        assert main(["--validate-only", "--schema", str(schema_path)]) == 1

    def test_validate_only_unknown_rule(self, workdir: Path) -> None:
        """Test unknown rule names fail validation."""
        assert main(["--validate-only", "--validate", "nope"]) == 1

    def test_bad_settings(self, contacts_csv: Path, workdir: Path) -> None:
        """Test a malformed settings file is reported as an error."""
        config_dir = workdir / "config"
        config_dir.mkdir()
        (config_dir / "settings.yaml").write_text("output:\n  format: pdf\n", encoding="utf-8")
        assert main([str(contacts_csv)]) == 1

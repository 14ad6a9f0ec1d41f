"""Tests for CLI tool."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from fieldgrammar import Schema, __version__, save_schema


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "fieldgrammar.cli.main", *args],
        capture_output=True,
        text=True,
    )


@pytest.fixture
def schema_file(tmp_path: Path, device_schema: Schema) -> Path:
    path = tmp_path / "device.json"
    save_schema(device_schema, path)
    return path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "fieldgrammar: Field Grammar Schema Codec" in result.stdout
    assert "--encode" in result.stdout
    assert "--analyze" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert f"fieldgrammar {__version__}" in result.stdout


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = run_cli()
    assert result.returncode == 0
    assert "fieldgrammar: Field Grammar Schema Codec" in result.stdout


@pytest.mark.parametrize("fmt, marker", [("compressed", "z"), ("bitpacked", "b")])
def test_cli_encode_decode(schema_file: Path, device_schema: Schema, fmt: str, marker: str) -> None:
    """A token printed by --encode decodes back to the same schema."""
    encoded = run_cli("--encode", str(schema_file), "--format", fmt)
    assert encoded.returncode == 0
    token = encoded.stdout.strip()
    assert token.startswith(marker)

    decoded = run_cli("--decode", token)
    assert decoded.returncode == 0
    assert Schema.from_json(decoded.stdout) == device_schema


def test_cli_defaults(schema_file: Path) -> None:
    """Test CLI --defaults prints default data as JSON."""
    result = run_cli("--defaults", str(schema_file))
    assert result.returncode == 0

    data = json.loads(result.stdout)
    assert data["id"] == 0
    assert data["label"] is None
    assert data["action"] == {"type": "start", "delay": 0}


def test_cli_analyze(schema_file: Path) -> None:
    """Test CLI --analyze with a schema file."""
    result = run_cli("--analyze", str(schema_file))
    assert result.returncode == 0
    assert "Device" in result.stdout
    assert "1. id" in result.stdout
    assert "Bit-packed schema token:" in result.stdout
    assert "Compressed schema token:" in result.stdout


def test_cli_analyze_missing_file() -> None:
    """Test CLI --analyze with missing file."""
    result = run_cli("--analyze", "nonexistent.json")
    assert result.returncode == 1
    assert "not found" in result.stderr.lower()


def test_cli_decode_corrupt_token() -> None:
    """Corrupt tokens report an error instead of a traceback."""
    result = run_cli("--decode", "b!!!")
    assert result.returncode == 1
    assert "Corrupt schema token" in result.stderr


def test_cli_encode_invalid_schema(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"name": "S", "fields": [{"type": "int", "name": "n", "min": 3, "max": 1}]}')

    result = run_cli("--encode", str(path))
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_verbose_logs(schema_file: Path) -> None:
    """--verbose turns on debug logging."""
    result = run_cli("--verbose", "--encode", str(schema_file), "--format", "bitpacked")
    assert result.returncode == 0
    assert "DEBUG fieldgrammar.tokens.bitpacked" in result.stderr

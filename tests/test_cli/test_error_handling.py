"""Tests for the CLI error handling decorator."""

import pytest
import structlog
import typer

from keyport.cli.decorators import error_handling
from keyport.cli.decorators.error_handling import error_event, handle_errors
from keyport.core.errors import (
    ConfigError,
    DeviceError,
    FileSystemError,
    GenerationError,
    KeymapError,
    KeyportError,
    ParseError,
    create_file_error,
)


def failing(error: Exception):
    @handle_errors
    def command() -> None:
        raise error

    return command


def run_captured(monkeypatch, error: Exception) -> tuple[list[dict], typer.Exit]:
    with structlog.testing.capture_logs() as logs:
        monkeypatch.setattr(error_handling, "logger", structlog.get_logger("test"))
        with pytest.raises(typer.Exit) as exc_info:
            failing(error)()
    return logs, exc_info.value


@pytest.mark.parametrize(
    "error, event",
    [
        (ParseError("x"), "parse_error"),
        (GenerationError("x"), "generation_error"),
        (KeymapError("x"), "keymap_error"),
        (ConfigError("x"), "configuration_error"),
        (FileSystemError("x"), "file_error"),
        (DeviceError("x"), "device_error"),
        (KeyportError("x"), "keyport_error"),
    ],
)
def test_error_event(error, event):
    assert error_event(error) == event


def test_parse_error_logs_context(monkeypatch, capsys):
    error = ParseError(
        "Unterminated bindings list in 'base' at line 7", {"layer": "base", "line": 7}
    )
    logs, exit_error = run_captured(monkeypatch, error)

    assert exit_error.exit_code == 1
    assert logs == [
        {
            "event": "parse_error",
            "log_level": "error",
            "error_class": "ParseError",
            "error": "Unterminated bindings list in 'base' at line 7",
            "layer": "base",
            "line": 7,
        }
    ]
    assert "Unterminated bindings list" in capsys.readouterr().err


def test_generation_error_event(monkeypatch):
    logs, _ = run_captured(monkeypatch, GenerationError("bad row", {"layer": 1}))
    assert logs[0]["event"] == "generation_error"
    assert logs[0]["layer"] == 1


def test_file_error_keeps_underlying_error_type(monkeypatch, tmp_path):
    error = create_file_error(tmp_path / "x.json", "read_text", FileNotFoundError("gone"))
    logs, _ = run_captured(monkeypatch, error)

    assert logs[0]["event"] == "file_error"
    assert logs[0]["error_class"] == "FileSystemError"
    assert logs[0]["error_type"] == "FileNotFoundError"
    assert logs[0]["operation"] == "read_text"


def test_unexpected_error(monkeypatch, capsys):
    logs, exit_error = run_captured(monkeypatch, RuntimeError("boom"))

    assert exit_error.exit_code == 1
    assert logs[0]["event"] == "unexpected_error"
    assert logs[0]["error"] == "boom"
    assert "Unexpected error: boom" in capsys.readouterr().err


def test_exit_passes_through():
    with pytest.raises(typer.Exit) as exc_info:
        failing(typer.Exit(3))()
    assert exc_info.value.exit_code == 3


def test_success_returns_value():
    assert handle_errors(lambda: 42)() == 42

"""Tests for stud logging setup."""

import json
import logging
from pathlib import Path

from stud.logging import ConsoleFormatter, JsonFormatter, get_logger, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("stud.git.runner", logging.INFO, __file__, 1, "ran %s", ("git status",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_git_extras(self) -> None:
        data = json.loads(JsonFormatter().format(_record(command="git status", exit_code=0)))
        assert data["level"] == "info"
        assert data["logger"] == "stud.git.runner"
        assert data["message"] == "ran git status"
        assert data["command"] == "git status"
        assert data["exit_code"] == 0

    def test_console_format(self) -> None:
        assert "ran git status" in ConsoleFormatter().format(_record())


class TestSetup:
    def test_get_logger_namespace(self) -> None:
        assert get_logger("config").name == "stud.config"

    def test_json_file_output(self, tmp_path: Path) -> None:
        setup_logging(level="debug", log_dir=tmp_path, json_output=True, console_output=False)
        try:
            get_logger("test").info("hello")
            for handler in logging.getLogger("stud").handlers:
                handler.flush()
            lines = (tmp_path / "stud.log").read_text().splitlines()
            assert json.loads(lines[-1])["message"] == "hello"
        finally:
            setup_logging()

    def test_level(self) -> None:
        setup_logging(level="error")
        try:
            assert logging.getLogger("stud").level == logging.ERROR
        finally:
            setup_logging()

"""Unit tests for logging setup."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from pathlib import Path

import pytest

from hookable import Hookable
from hookable.config import LoggingConfig
from hookable.logger import PACKAGE_LOGGER, get_logger, setup_logging


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


def test_default_level_is_info() -> None:
    package_logger = setup_logging()

    assert package_logger.name == "hookable"
    assert package_logger.level == logging.INFO


def test_default_format(tmp_path: Path) -> None:
    log_file = tmp_path / "format.log"
    setup_logging({"file_path": str(log_file)})

    get_logger("hookable.registry").info("hello-format")

    pattern = re.compile(r"^\[.+\] \[INFO\] \[hookable\.registry\] hello-format$")
    assert pattern.match(_read_text(log_file).strip()) is not None


def test_accepts_logging_config_model(tmp_path: Path) -> None:
    log_file = tmp_path / "model.log"
    setup_logging(LoggingConfig(level="WARNING", file_path=str(log_file)))

    logger = get_logger("hookable.model")
    logger.info("filtered")
    logger.warning("kept")

    content = _read_text(log_file)
    assert "filtered" not in content
    assert "kept" in content


def test_unknown_level_falls_back_to_info() -> None:
    assert setup_logging({"level": "chatty"}).level == logging.INFO


def test_repeated_setup_replaces_handlers(tmp_path: Path) -> None:
    setup_logging({"file_path": str(tmp_path / "a.log")})
    package_logger = setup_logging({"file_path": str(tmp_path / "b.log")})

    assert len(package_logger.handlers) == 2


def test_console_output(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging({"level": "INFO"})

    get_logger("hookable.console").info("to-console")

    captured = capsys.readouterr()
    assert "to-console" in captured.err


def test_registry_debug_messages(tmp_path: Path) -> None:
    log_file = tmp_path / "debug.log"
    setup_logging({"level": "DEBUG", "file_path": str(log_file)})

    registry = Hookable()
    registry.add("greet", str.upper)
    registry.apply("greet", "hi")

    content = _read_text(log_file)
    assert re.search(r"Added \S+ to hook 'greet' at priority 10", content)
    assert "Applying hook 'greet' through 1 callbacks" in content


def test_json_format_keeps_extra_fields(tmp_path: Path) -> None:
    log_file = tmp_path / "json.log"
    setup_logging({"file_path": str(log_file), "json_format": True})

    get_logger("hookable.json").info("json-message", extra={"hook_name": "init"})

    record = json.loads(_read_text(log_file).strip())
    assert record["level"] == "INFO"
    assert record["name"] == "hookable.json"
    assert record["message"] == "json-message"
    assert record["hook_name"] == "init"
    assert "timestamp" in record

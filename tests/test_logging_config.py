import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from slidereader.configs import logging_config
from slidereader.configs.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_loguru() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logging_applies_level() -> None:
    setup_logging(log_level="debug")
    assert logging.getLogger("slidereader").level == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_defaults_to_config_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(logging_config.config, "log_level", "WARNING")
    setup_logging()
    assert logging.getLogger("slidereader").level == logging.WARNING


def test_loguru_messages_reach_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(log_level="INFO")
    logger.info("extraction summary line")
    assert "extraction summary line" in capsys.readouterr().err


def test_file_logging_writes_component_file(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    setup_logging(
        log_level="INFO",
        enable_file_logging=True,
        log_dir=str(log_dir),
        component="cli",
    )
    logger.info("written to file")
    assert "written to file" in (log_dir / "cli.log").read_text()

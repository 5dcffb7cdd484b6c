from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from kb_dashboard.utils.logging import PACKAGE_LOGGER, get_logger, setup_logging


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in saved[0]:
        logger.addHandler(handler)
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
    structlog.reset_defaults()


def test_setup_logging_leaves_root_logger_alone(package_logger: logging.Logger) -> None:
    root_handlers = list(logging.getLogger().handlers)

    handler = setup_logging("DEBUG", "json")

    assert logging.getLogger().handlers == root_handlers
    assert package_logger.handlers == [handler]
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False


def test_setup_logging_twice_keeps_single_handler(package_logger: logging.Logger) -> None:
    setup_logging()
    handler = setup_logging("warning")

    assert package_logger.handlers == [handler]
    assert package_logger.level == logging.WARNING


def test_json_events_carry_logger_name_and_fields(
    package_logger: logging.Logger,
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logging("INFO", "json")

    get_logger("kb_dashboard.ui.graph_view").warning("graph_links_dropped", dropped=2)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "graph_links_dropped"
    assert event["dropped"] == 2
    assert event["level"] == "warning"
    assert event["logger"] == "kb_dashboard.ui.graph_view"

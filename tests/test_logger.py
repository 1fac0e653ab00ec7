import io

import pytest

from revdash.models.enums import LogCategory, LogLevel
from revdash.utils.logger import Logger, configure_logger, get_logger


@pytest.fixture
def stream():
    return io.StringIO()


def test_message_with_detail_tree(stream):
    logger = Logger(use_colors=False, stream=stream)

    logger.info(LogCategory.TRANSACTION, "Transaction recorded", category="enterprise", amount="999.99")

    lines = stream.getvalue().splitlines()
    assert "TRANSACTION" in lines[0]
    assert lines[0].endswith("✓ Transaction recorded")
    assert lines[1].strip() == "├─ category: enterprise"
    assert lines[2].strip() == "└─ amount: 999.99"


def test_level_threshold(stream):
    logger = Logger(min_level=LogLevel.WARN, use_colors=False, stream=stream)

    logger.info(LogCategory.REVENUE, "hidden")
    logger.error(LogCategory.REVENUE, "shown")

    assert "hidden" not in stream.getvalue()
    assert "shown" in stream.getvalue()


def test_exc_info_appends_traceback(stream):
    logger = Logger(use_colors=False, stream=stream)

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.error(LogCategory.SYSTEM, "failed", exc_info=True)

    assert "RuntimeError: boom" in stream.getvalue()


def test_bound_logger_uses_its_category(stream):
    log = Logger(use_colors=False, stream=stream).for_category(LogCategory.API)

    log.warn("slow request")

    assert "API" in stream.getvalue()
    assert "⚠ slow request" in stream.getvalue()


def test_configure_logger_keeps_singleton(stream):
    original = get_logger()
    try:
        configure_logger(LogLevel.DEBUG, use_colors=False, stream=stream)
        assert get_logger() is original
        assert original.min_level is LogLevel.DEBUG

        get_logger().for_category(LogCategory.CONFIG).debug("visible now")
        assert "visible now" in stream.getvalue()
    finally:
        configure_logger()

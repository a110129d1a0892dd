import logging

from utils.logger import LOG_FORMAT, get_logger


def test_get_logger_attaches_single_handler():
    logger = get_logger("tests.network.logger")
    again = get_logger("tests.network.logger", level=logging.DEBUG)

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT
    assert logger.level == logging.DEBUG

"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route registrator logs to stderr at the configured level.

    Safe to call repeatedly: the level is refreshed, the handler is added once.
    """
    logger = logging.getLogger("camera_registrator")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

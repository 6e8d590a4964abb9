from __future__ import annotations

import logging

_PACKAGE_LOGGER = "shortlink_client"
_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call more than once; later calls only adjust the level.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if level is None:
        level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(handler, "_shortlink_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._shortlink_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger

"""Process-wide log setup for the API server and the maintenance scripts."""

import logging
from pathlib import Path
from typing import Optional


NOISY_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Send application logs to stderr and, if ``logfile`` is set, to that file.

    Does nothing when the root logger already has handlers, e.g. when
    uvicorn or a test runner configured logging first.  Unknown level
    names fall back to INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        # create_app() runs once per test case.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # httpx logs every upstream request at INFO, query string included.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

"""
Logging Configuration Module
============================

Centralized logging setup for glacier-sweeper.

A sweep can run for many hours while inventory jobs complete, so the
log is the main record of what happened. This module configures:

- Console output on stderr through Rich, keeping stdout for prompts
- An optional plain-text log file for long unattended runs
- Quieter third-party loggers (boto3, botocore, urllib3)

Example
-------
>>> import logging
>>> from glacier_sweeper.core.logging import setup_logging
>>>
>>> setup_logging(level="INFO", log_file="sweep.log")
>>> logger = logging.getLogger(__name__)
>>> logger.info("Starting sweep")

See Also
--------
rich.logging : Rich library's logging handler.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Configure application-wide logging.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to a log file. Every record is also written there with a
        timestamp, which is useful when polling runs overnight.
    console : Console, optional
        Rich Console for the console handler. Defaults to stderr.

    Notes
    -----
    Replaces any handlers already attached to the root logger, so it is
    safe to call more than once.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured: level=%s, file=%s",
        logging.getLevelName(level),
        log_file or "None",
    )

"""Logging setup: INFO/DEBUG go to stdout, WARNING and above go to stderr"""

import logging
import sys

from registration_intake.config import config


class BelowWarningFilter(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def setup_logging(log_level: str | None = None):
    """Route root logging to stdout/stderr at log_level or config["log_level"]"""
    level_name = (log_level or config.get("log_level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(BelowWarningFilter())
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    root_logger.handlers.clear()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

"""Per-run loggers that keep profile contact details out of log output."""

from __future__ import annotations

import logging
import re

from .io_utils import RunPaths
from .profile import mask_email

EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


class SensitiveDataFilter(logging.Filter):
    """Masks email addresses in the rendered message before any handler sees it."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = EMAIL_PATTERN.sub(lambda match: mask_email(match.group(0)), message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def build_logger(run_paths: RunPaths, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(f"autofill.{run_paths.run_id}")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    if not logger.handlers:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
        sensitive = SensitiveDataFilter()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(sensitive)
        logger.addHandler(console_handler)

        file_handler = logging.FileHandler(
            run_paths.build_path("autofill.log"), encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive)
        logger.addHandler(file_handler)

    return logger


__all__ = ["EMAIL_PATTERN", "SensitiveDataFilter", "build_logger"]

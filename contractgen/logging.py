"""Logging for contractgen runs: console output plus an optional run log."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "contractgen"
_CONSOLE_FORMAT = "[contractgen] %(levelname)s %(message)s"
_RUN_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the contractgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route contractgen records to stderr and, with ``log_file``, to a run log.

    The console honours ``verbose``. The run log always records DEBUG and is
    appended to, so every regeneration of a ``--watch`` session lands in the
    same file.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    _reset_handlers(logger)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    run_log = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    run_log.setLevel(logging.DEBUG)
    run_log.setFormatter(logging.Formatter(_RUN_LOG_FORMAT))
    logger.addHandler(run_log)
    logger.setLevel(logging.DEBUG)
    return logger


def _reset_handlers(logger: logging.Logger) -> None:
    # main() can run more than once per process; release run logs held by earlier calls.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]

# barrage/logging_config.py
import logging
import os
import sys

LEVEL_ENV = "LOGLVL"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def resolve_level(value: str | None = None) -> int:
    """
    Map a level name (default: $LOGLVL, then info) to a logging level.
    Raises ValueError for unknown names.
    """
    if value is None:
        value = os.environ.get(LEVEL_ENV, "info")
    try:
        return _LEVELS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"Invalid value for ${LEVEL_ENV}: {value!r}") from None


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configure logging to print to stdout by default.
    If log_file is provided, also log to that file.
    """
    # Get root logger
    logger = logging.getLogger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Clear any existing handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception

    return logger

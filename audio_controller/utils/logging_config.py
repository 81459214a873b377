import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from colorlog import ColoredFormatter


def setup_logging(level: int = logging.INFO, log_dir: Optional[Path] = None):
    """Configure the logging system.

    Only entry points call this; the library itself just asks for loggers.
    """
    from .resource_finder import get_project_root

    if log_dir is None:
        log_dir = get_project_root() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "audio_controller.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers (avoid duplicates).
    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.suffix = "%Y-%m-%d.log"

    formatter = logging.Formatter(
        "%(asctime)s[%(name)s] - %(levelname)s - %(message)s"
    )

    color_formatter = ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s[%(blue)s%(name)s%(reset)s] - "
        "%(log_color)s%(levelname)s%(reset)s - %(message)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={"asctime": {"green": "green"}, "name": {"blue": "blue"}},
    )
    console_handler.setFormatter(color_formatter)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.debug("Logging initialized, log file: %s", log_file)

    return log_file


def get_logger(name):
    """Get a logger with the shared configuration.

    Args:
        name: Logger name, usually the module name

    Returns:
        logging.Logger: Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.debug("Running %s", cmd)
    """
    logger = logging.getLogger(name)

    def log_error_with_exc(msg, *args, **kwargs):
        """
        Log an error and automatically include the exception stack.
        """
        kwargs["exc_info"] = True
        logger.error(msg, *args, **kwargs)

    logger.error_exc = log_error_with_exc

    return logger

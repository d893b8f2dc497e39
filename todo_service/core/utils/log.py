import logging
import logging.config
import queue
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import Any

import uvicorn

from todo_service.core.utils.config import Settings

DATE_FORMAT = "%d-%b-%y %H:%M:%S"

# ANSI 256 colors, see https://talyian.github.io/ansicolors/
LEVEL_COLORS = {
    logging.DEBUG: "\033[38;5;12m",
    logging.INFO: "\033[38;5;10m",
    logging.WARNING: "\033[38;5;11m",
    logging.ERROR: "\033[38;5;9m",
    logging.CRITICAL: "\033[38;5;1m",
}
BOLD = "\033[1m"
RESET = "\033[0m"

# Log file name -> (max size in bytes, number of rotated files kept)
LOG_FILES: dict[str, tuple[int, int]] = {
    "access": (40 * 1024 * 1024, 50),
    "errors": (10 * 1024 * 1024, 20),
    "todo": (10 * 1024 * 1024, 20),
}

# Service logger -> log file it writes to, in addition to the console
SERVICE_LOGGERS = {
    "todo_service.access": "access",
    "todo_service.error": "errors",
    "todo_service.todo": "todo",
}


class ColoredConsoleFormatter(uvicorn.logging.DefaultFormatter):
    """
    Console formatter printing the level name in bold and the message in the color of its level.
    Unknown levels use the color of errors.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(datefmt=DATE_FORMAT)
        self.formatters = {
            level: logging.Formatter(
                f"%(asctime)s - %(name)s - {BOLD}%(levelname)s{RESET} - {color}%(message)s{RESET}",
                DATE_FORMAT,
            )
            for level, color in LEVEL_COLORS.items()
        }

    def format(self, record: logging.LogRecord) -> str:
        formatter = self.formatters.get(record.levelno, self.formatters[logging.ERROR])
        return formatter.format(record)


class LogConfig:
    """
    Logging configuration of the service, applied with `LogConfig().initialize_loggers(settings)`.

    Each `todo_service.*` logger writes to the console and to its own rotating file in `logs/`.
    `uvicorn.access` is silenced as requests are logged by `todo_service.access` with their request id.
    """

    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def get_config_dict(self, settings: Settings) -> dict[str, Any]:
        # See https://docs.python.org/3/library/logging.config.html#logging-config-dictschema
        minimum_level = "DEBUG" if settings.LOG_DEBUG_MESSAGES else "INFO"

        handlers: dict[str, dict[str, Any]] = {
            "console": {
                "formatter": "console_formatter",
                "class": "logging.StreamHandler",
                "level": minimum_level,
            },
        }
        for name, (max_bytes, backup_count) in LOG_FILES.items():
            handlers[f"file_{name}"] = {
                "formatter": "default",
                "class": "logging.handlers.RotatingFileHandler",
                "filename": f"logs/{name}.log",
                "maxBytes": max_bytes,
                "backupCount": backup_count,
                "level": "INFO",
            }

        loggers: dict[str, dict[str, Any]] = {
            "root": {"level": "DEBUG", "handlers": ["console"]},
            "todo_service": {"propagate": False},
            "uvicorn.access": {"handlers": []},
            "uvicorn.error": {
                "handlers": ["file_errors", "console"],
                "level": minimum_level,
                "propagate": False,
            },
        }
        for logger_name, file_name in SERVICE_LOGGERS.items():
            loggers[logger_name] = {
                "handlers": [f"file_{file_name}", "console"],
                "level": minimum_level,
            }

        return {
            "version": 1,
            # Database and uvicorn loggers are only kept when debugging
            "disable_existing_loggers": not settings.LOG_DEBUG_MESSAGES,
            "formatters": {
                "default": {"format": self.LOG_FORMAT, "datefmt": DATE_FORMAT},
                "console_formatter": {
                    "()": "todo_service.core.utils.log.ColoredConsoleFormatter",
                },
            },
            "handlers": handlers,
            "loggers": loggers,
        }

    def initialize_loggers(self, settings: Settings) -> None:
        """
        Apply the configuration, then move the handlers of every configured logger behind a queue.

        Endpoints only push records to the queue; a `QueueListener` thread runs the console and file handlers.
        """
        # File handlers can not create the logs/ folder themselves
        Path("logs/").mkdir(parents=True, exist_ok=True)

        config_dict = self.get_config_dict(settings=settings)
        logging.config.dictConfig(config_dict)

        for name in config_dict["loggers"]:
            logger = logging.getLogger(name)
            if not logger.handlers:
                continue

            log_queue: queue.Queue[Any] = queue.Queue(-1)
            QueueListener(log_queue, *logger.handlers, respect_handler_level=True).start()
            logger.handlers = [QueueHandler(log_queue)]

import logging
from logging.config import dictConfig

from exam_planner import config


def configure_logging(level: str | None = None) -> None:
    """Route log records through rich so they share the CLI console."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(message)s",
                    "datefmt": "[%X]",
                },
            },
            "handlers": {
                "default": {
                    "class": "rich.logging.RichHandler",
                    "formatter": "default",
                    "show_path": False,
                },
            },
            "root": {
                "handlers": ["default"],
                "level": (level or config.LOG_LEVEL).upper(),
            },
        }
    )
    logging.getLogger(__name__).debug("Logging configured")

"""Structured logging built on structlog.

Usage:
    logger = get_logger("quizzes")
    logger.info("Quiz generated", quiz_id=quiz.id, questions=len(quiz.questions))
"""

import logging
import sys

import structlog

_configured = False


def configure_logging(level: str = "INFO", environment: str = "development") -> None:
    """Configure stdlib logging and structlog processors.

    Development gets colored key=value lines; any other environment gets
    one JSON object per line.
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if environment == "development"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a named structured logger."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)

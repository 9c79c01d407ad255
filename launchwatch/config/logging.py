"""structlog setup."""

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Drop log events below level, keeping structlog's default processors."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )

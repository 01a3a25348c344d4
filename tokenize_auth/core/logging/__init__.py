"""
Logging configuration module for structured logging.

Configures structlog with ISO timestamps, the log level, and either JSON output
(for log shippers) or human-readable console output (for development).
"""

import logging
from typing import Optional

import structlog
from structlog.types import Processor

from tokenize_auth.core.config.settings import TokenizeSettings


def configure_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    settings: Optional[TokenizeSettings] = None,
) -> None:
    """
    Configures the host application's logging for Tokenize.

    Explicit arguments win over the values found in `settings`.
    """
    if settings is None:
        from tokenize_auth.core.config.settings import settings as default_settings

        settings = default_settings
    level = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
    ]

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("tokenize_auth").setLevel(level)

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

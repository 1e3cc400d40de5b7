"""
Configures structured logging for the application using structlog.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

if TYPE_CHECKING:
    from siftcore.config.config import MonitoringConfig


def add_document_url(logger: logging.Logger, method_name: str, event_dict: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Adds the URL of the document being parsed when it has been bound to the
    context (see ``ContentSifter.parse``).
    """
    from structlog.contextvars import get_contextvars

    ctx = get_contextvars()
    if "document_url" in ctx and "document_url" not in event_dict:
        event_dict["document_url"] = ctx["document_url"]
    return event_dict


def configure_logging(config: MonitoringConfig) -> None:
    """
    Sets up structlog to handle all logging for the application.
    """
    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        add_document_url,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    log_renderer: Any
    if config.log_file:
        # Structured JSON logging for file output
        log_renderer = structlog.processors.JSONRenderer()
        handler: logging.Handler = logging.FileHandler(config.log_file)
    else:
        log_renderer = (
            structlog.processors.JSONRenderer() if config.json_logs else structlog.dev.ConsoleRenderer(colors=True)
        )
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=log_renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(config.log_level.upper())

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("siftcore.logging")
    logger.info("Logging configured", level=config.log_level, output=config.log_file or "console")

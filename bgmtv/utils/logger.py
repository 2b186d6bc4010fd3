"""Logging configuration using structlog."""

import logging
import time
from typing import Any, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from bgmtv.config import get_settings

# Rich console for pretty printing
console = Console(stderr=True)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for an application using the client.

    The library never calls this itself; it only emits through get_logger().

    Args:
        log_level: Override log level from settings
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()

    # Configure standard logging
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=settings.debug,
                show_time=True,
                show_level=True,
                show_path=settings.debug,
                markup=False,
            )
        ],
        force=True,  # Force reconfiguration even if already configured
    )

    _configure_third_party_logging(level, settings.debug)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add callsite info in debug mode
    if settings.debug:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger("bgmtv").debug(
        "Logging configured",
        log_level=level,
        debug_mode=settings.debug,
        environment=settings.app_env,
    )


def _configure_third_party_logging(level: str, debug: bool) -> None:
    """
    Configure logging for the HTTP stack.

    Args:
        level: Log level string (DEBUG, INFO, etc.)
        debug: Whether debug mode is enabled
    """
    if debug and level == "DEBUG":
        logging.getLogger("aiohttp.client").setLevel(logging.DEBUG)
    else:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str, **kwargs: Any) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
        **kwargs: Additional context to bind to logger

    Returns:
        Configured structlog BoundLogger
    """
    logger = structlog.get_logger(name)

    if kwargs:
        logger = logger.bind(**kwargs)

    return logger


class LogTimer:
    """Context manager for timing and logging operations."""

    def __init__(
        self,
        logger: structlog.BoundLogger,
        operation: str,
        **extra_context: Any
    ):
        """
        Initialize timer context.

        Args:
            logger: Logger instance to use
            operation: Name of the operation being timed
            **extra_context: Additional context to log
        """
        self.logger = logger
        self.operation = operation
        self.extra_context = extra_context
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        """Start timing."""
        self.start_time = time.perf_counter()
        self.logger.debug(
            f"[START] {self.operation}",
            operation=self.operation,
            **self.extra_context
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """End timing and log duration."""
        self.duration = time.perf_counter() - self.start_time if self.start_time else 0

        if exc_type is not None:
            self.logger.error(
                f"[FAILED] {self.operation}",
                operation=self.operation,
                duration_seconds=round(self.duration, 3),
                error_type=exc_type.__name__,
                error=str(exc_val),
                **self.extra_context
            )
        else:
            self.logger.info(
                f"[COMPLETE] {self.operation}",
                operation=self.operation,
                duration_seconds=round(self.duration, 3),
                **self.extra_context
            )

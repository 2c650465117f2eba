"""LoggerProtocol definition for structured logging.

Application services log through this port; the container hands them a
structlog logger, which already matches it structurally.

Events are snake_case names plus key-value context. Never pass token
material as context; the structlog chain redacts known token keys, but
that is the last line, not the first.

Usage:
    from storagebridge.core.container import get_logger

    logger: LoggerProtocol = get_logger()
    logger.info("storage_connect_succeeded", provider="dropbox")
"""

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Structured logger (event name + key-value context)."""

    def debug(self, event: str, /, **context: Any) -> Any: ...

    def info(self, event: str, /, **context: Any) -> Any: ...

    def warning(self, event: str, /, **context: Any) -> Any: ...

    def error(self, event: str, /, **context: Any) -> Any: ...

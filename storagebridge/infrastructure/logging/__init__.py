"""Logging configuration."""

from storagebridge.infrastructure.logging.structlog_config import (
    configure_logging,
    redact_tokens,
)

__all__ = ["configure_logging", "redact_tokens"]

"""Structured logging setup."""

from query_report.infrastructure.logging.config import configure_logging, get_logger


__all__ = ["configure_logging", "get_logger"]

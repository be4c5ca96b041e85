"""Observability: structured logging and correlation ids."""

from .logging import configure_logging, get_correlation_id, set_correlation_id

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]

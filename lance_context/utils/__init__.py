"""Utility modules for lance-context.

- **errors** -- Exception hierarchy rooted at LanceContextError; the backend
  factory relies on it to tell "try the next backend" apart from real bugs.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **retry** -- exponential-backoff retry for transient HTTP failures
  (429, 408, 5xx, dropped connections).
"""

from lance_context.utils.errors import (
    AllBackendsFailedError,
    AuthenticationError,
    ConfigurationError,
    EmbeddingAPIError,
    LanceContextError,
    ProviderUnavailableError,
)
from lance_context.utils.logging import configure_logging, configure_logging_from, get_logger
from lance_context.utils.retry import RetryPolicy, request_with_retry

__all__ = [
    "AllBackendsFailedError",
    "AuthenticationError",
    "ConfigurationError",
    "EmbeddingAPIError",
    "LanceContextError",
    "ProviderUnavailableError",
    "RetryPolicy",
    "configure_logging",
    "configure_logging_from",
    "get_logger",
    "request_with_retry",
]

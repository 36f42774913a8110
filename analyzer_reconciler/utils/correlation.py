# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Correlation ID generation and context management for request tracing.

Each invocation envelope carries a client request token. It is used as the
correlation ID for every log line written while that envelope is handled, so
a single reconciliation can be followed end to end.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Context variable to store correlation ID per invocation
_correlation_id_context: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)


def generate_correlation_id() -> str:
    """
    Generate a unique correlation ID using UUID4.

    Returns:
        A unique correlation ID string in UUID4 format
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID in the current context.

    Args:
        correlation_id: The correlation ID to set
    """
    _correlation_id_context.set(correlation_id)


def get_correlation_id() -> str:
    """
    Get the correlation ID from the current context.

    Returns:
        The correlation ID if set, or an empty string if not set
    """
    return _correlation_id_context.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    A new UUID4 is generated when none is supplied. The previous value is
    restored on exit.
    """
    correlation_id = correlation_id or generate_correlation_id()
    token = _correlation_id_context.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id_context.reset(token)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that stamps the current correlation ID on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True

"""Utility helpers for the analyzer reconciler."""

from .arn_utils import is_analyzer_arn, is_valid_arn, parse_arn
from .correlation import (
    CorrelationIDFilter,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "is_analyzer_arn",
    "is_valid_arn",
    "parse_arn",
    "CorrelationIDFilter",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]

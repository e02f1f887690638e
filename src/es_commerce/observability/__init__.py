"""Observability – correlation and logging."""

from es_commerce.observability.correlation import CorrelationContext, RequestContext
from es_commerce.observability.logging import (
    CorrelationProcessor,
    JsonLoggerFactory,
    configure_logging,
    get_logger,
)

__all__ = [
    "CorrelationContext",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "RequestContext",
    "configure_logging",
    "get_logger",
]

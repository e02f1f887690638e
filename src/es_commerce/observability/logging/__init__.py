"""Observability – structured logging helpers."""
from es_commerce.observability.logging.factory import JsonLoggerFactory, configure_logging
from es_commerce.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = ["CorrelationProcessor", "JsonLoggerFactory", "configure_logging", "get_logger"]

"""
es_commerce – event-sourced shop on an in-process aggregate/projection runtime.

Import path convention::

    from es_commerce.kernel.errors import InvariantViolationError
    from es_commerce.application.event_sourcing import App, AggregateDefinition
    from es_commerce.domain import build_shop
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

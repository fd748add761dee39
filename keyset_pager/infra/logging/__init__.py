"""Logging infrastructure.

Standard ``logging`` loggers are used throughout the package. For debug
messages that format row counts or compiled statements, use the lazy adapter
so the message is only built when DEBUG is enabled:

    from keyset_pager.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {compute_heavy_data()}")
"""

from keyset_pager.infra.logging.lazy import (
    LazyLoggerAdapter,
    get_lazy_logger,
)

__all__ = [
    "LazyLoggerAdapter",
    "get_lazy_logger",
]

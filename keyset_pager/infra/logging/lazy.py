"""Deferred log message construction.

Pagination logs a summary line per page (ordering, limit, edge and match
counts). Building those strings is wasted work unless DEBUG is on, so the
adapter below accepts zero-argument callables in place of the message or
any %-style argument and only calls them for records that will be emitted.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """``LoggerAdapter`` whose message and arguments may be callables.

    ``debug``/``info``/``warning``/``error``/``exception`` all route through
    ``log`` on the stdlib adapter, so overriding ``log`` covers them.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"seek on {len(conditions)} cursors")
        logger.info("page of %s rows", lambda: len(rows))
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *(_resolve(arg) for arg in args), **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Return a lazy adapter over ``logging.getLogger(name)``.

    Keyword arguments are attached to every record as ``extra`` attributes.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)

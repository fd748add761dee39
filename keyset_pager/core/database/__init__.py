"""Core database package: repository, query executor and statement filters.

Repository:
    - BaseRepository[T]: cursor and offset pagination with explicit session passing

Query Executor:
    - SQLAlchemyQueryExecutor: runs keyset pages (rows + count) for a base Select

Query Filters:
    - StatementFilter: base class for statement filters
    - WhereIfDefined: equality filter skipped when the value is None
    - LimitOffset: offset pagination window

Exceptions:
    - RepositoryError: base class
    - MalformedCursorError: cursor cannot be decoded against the ordering
    - InvalidOrderSpecError: empty or unsupported order declaration
    - UnknownFieldError: sort field not found on the statement or row
"""

from keyset_pager.core.database.exceptions import (
    InvalidOrderSpecError,
    MalformedCursorError,
    RepositoryError,
    UnknownFieldError,
)
from keyset_pager.core.database.filters import LimitOffset, StatementFilter, WhereIfDefined
from keyset_pager.core.database.executor import SQLAlchemyQueryExecutor
from keyset_pager.core.database.repository import BaseRepository

__all__ = [
    # Repository
    "BaseRepository",
    # Executor
    "SQLAlchemyQueryExecutor",
    # Filters
    "LimitOffset",
    "StatementFilter",
    "WhereIfDefined",
    # Exceptions
    "InvalidOrderSpecError",
    "MalformedCursorError",
    "RepositoryError",
    "UnknownFieldError",
]

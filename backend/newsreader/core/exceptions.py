"""
Typed errors raised by the news store and helpers translating database errors.
"""

from __future__ import annotations

import re
from typing import Optional

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)


class NewsStoreError(Exception):
    """Base class for news store failures."""

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation


class ValidationError(NewsStoreError):
    """Domain validation failed before reaching the database."""


class NotFoundError(NewsStoreError):
    """A single-entity lookup that must resolve found no row."""

    def __init__(self, entity: str, identifier, *, operation: Optional[str] = None) -> None:
        super().__init__(f"{entity} {identifier} not found", operation=operation)
        self.entity = entity
        self.identifier = identifier


class ReferentialViolationError(NewsStoreError):
    """The database rejected a write because dependent rows still exist."""

    def __init__(
        self,
        entity: str,
        constraint: Optional[str] = None,
        *,
        operation: Optional[str] = None,
    ) -> None:
        detail = f" ({constraint})" if constraint else ""
        super().__init__(f"{entity} is still referenced{detail}", operation=operation)
        self.entity = entity
        self.constraint = constraint


class ConstraintViolationError(NewsStoreError):
    """A uniqueness or required-field constraint was violated."""

    def __init__(
        self,
        entity: str,
        field: Optional[str] = None,
        *,
        reason: str = "constraint violated",
        operation: Optional[str] = None,
    ) -> None:
        target = f"{entity}.{field}" if field else entity
        super().__init__(f"{reason} on {target}", operation=operation)
        self.entity = entity
        self.field = field
        self.reason = reason


class ConnectivityError(NewsStoreError):
    """The storage backend is unreachable or the transaction could not complete."""


# SQLite: "UNIQUE constraint failed: news_sets.user_id, news_sets.name"
_SQLITE_FIELDS = re.compile(r"constraint failed: ([\w.,\s]+)")
# PostgreSQL: DETAIL:  Key (user_id, name)=(u1, default) already exists.
_PG_KEY_FIELDS = re.compile(r"Key \(([^)]+)\)")
_PG_NULL_FIELD = re.compile(r'null value in column "(\w+)"')
_PG_CONSTRAINT = re.compile(r'constraint "(\w+)"')


def _extract_fields(message: str) -> Optional[str]:
    match = _SQLITE_FIELDS.search(message)
    if match:
        columns = [part.strip().split(".")[-1] for part in match.group(1).split(",")]
        return ", ".join(column for column in columns if column)
    for pattern in (_PG_KEY_FIELDS, _PG_NULL_FIELD):
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def translate_database_error(
    exc: SQLAlchemyError,
    *,
    entity: str,
    operation: Optional[str] = None,
) -> NewsStoreError:
    """Map a SQLAlchemy exception onto the news store error taxonomy."""
    message = str(getattr(exc, "orig", None) or exc)
    lowered = message.lower()

    if isinstance(exc, IntegrityError):
        if "foreign key" in lowered:
            constraint = _PG_CONSTRAINT.search(message)
            return ReferentialViolationError(
                entity,
                constraint.group(1) if constraint else None,
                operation=operation,
            )
        if "not null" in lowered or "null value" in lowered:
            return ConstraintViolationError(
                entity,
                _extract_fields(message),
                reason="required field missing",
                operation=operation,
            )
        if "unique" in lowered or "duplicate key" in lowered:
            return ConstraintViolationError(
                entity,
                _extract_fields(message),
                reason="duplicate value",
                operation=operation,
            )
        return ConstraintViolationError(entity, _extract_fields(message), operation=operation)

    if isinstance(exc, (OperationalError, InterfaceError)):
        return ConnectivityError(f"Storage unavailable during {operation or 'operation'}: {message}", operation=operation)

    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return ConnectivityError(f"Connection lost during {operation or 'operation'}: {message}", operation=operation)

    return NewsStoreError(f"Failed to {operation or 'access'} {entity}: {message}", operation=operation)

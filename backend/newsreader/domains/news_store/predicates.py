"""
Named filter predicates for news store queries.

Each helper returns a SQLAlchemy boolean expression with bound parameters so
repositories can compose them with ``and_`` and the role algebra used by the
initializer can be exercised on its own.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional
from uuid import UUID

from sqlalchemy import false, select
from sqlalchemy.sql.elements import ColumnElement

from newsreader.models import DefinitionRole, NewsConfiguration, NewsDefinition


def normalize_roles(roles: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not roles:
        return frozenset()
    return frozenset(role.strip() for role in roles if role and role.strip())


def in_set(set_id: UUID) -> ColumnElement[bool]:
    return NewsConfiguration.news_set_id == set_id


def visible_only() -> ColumnElement[bool]:
    return NewsConfiguration.visible_only == True  # noqa: E712


def displayed() -> ColumnElement[bool]:
    return NewsConfiguration.displayed == True  # noqa: E712


def subscribed_by(subscribe_id: str) -> ColumnElement[bool]:
    return NewsConfiguration.subscribe_id == subscribe_id


def references_definition(definition_id: UUID) -> ColumnElement[bool]:
    return NewsConfiguration.news_definition_id == definition_id


def not_in_set(set_id: Optional[UUID]) -> ColumnElement[bool]:
    """Definition is not referenced by any configuration of ``set_id``."""
    present = (
        select(NewsConfiguration.id)
        .where(
            NewsConfiguration.news_definition_id == NewsDefinition.id,
            NewsConfiguration.news_set_id == set_id,
        )
        .correlate(NewsDefinition)
    )
    return ~present.exists()


def grants_any_role(roles: Iterable[str]) -> ColumnElement[bool]:
    """
    At least one of ``roles`` is among the definition's default roles.

    An empty role set never matches; it is not the same as "no filter".
    """
    wanted = sorted(normalize_roles(roles))
    if not wanted:
        return false()
    matching = (
        select(DefinitionRole.role_name)
        .where(
            DefinitionRole.definition_id == NewsDefinition.id,
            DefinitionRole.role_name.in_(wanted),
        )
        .correlate(NewsDefinition)
    )
    return matching.exists()

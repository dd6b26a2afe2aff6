"""
Repository helpers for news definitions and their default roles.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from newsreader.models import DefinitionRole, NewsDefinition, PredefinedNewsDefinition


class DefinitionRepository:
    """Data access layer for predefined and user-defined definitions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_by_id(self, definition_id: UUID) -> Optional[NewsDefinition]:
        return await self._session.get(NewsDefinition, definition_id)

    async def fetch_predefined_by_id(self, definition_id: UUID) -> Optional[PredefinedNewsDefinition]:
        stmt = select(PredefinedNewsDefinition).where(PredefinedNewsDefinition.id == definition_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def fetch_predefined_by_name(self, name: str) -> Optional[PredefinedNewsDefinition]:
        stmt = select(PredefinedNewsDefinition).where(PredefinedNewsDefinition.name == name)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_predefined(self, *criteria: ColumnElement[bool]) -> List[PredefinedNewsDefinition]:
        """Predefined definitions matching every criterion, ordered by name."""
        stmt = select(PredefinedNewsDefinition)
        if criteria:
            stmt = stmt.where(and_(*criteria))
        stmt = stmt.order_by(PredefinedNewsDefinition.name, PredefinedNewsDefinition.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_distinct_roles(self) -> List[str]:
        stmt = (
            select(DefinitionRole.role_name)
            .join(PredefinedNewsDefinition, PredefinedNewsDefinition.id == DefinitionRole.definition_id)
            .distinct()
            .order_by(DefinitionRole.role_name)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, definition: NewsDefinition) -> NewsDefinition:
        self._session.add(definition)
        await self._session.flush()
        await self._session.refresh(definition)
        return definition

    async def delete(self, definition: NewsDefinition) -> None:
        await self._session.delete(definition)
        await self._session.flush()

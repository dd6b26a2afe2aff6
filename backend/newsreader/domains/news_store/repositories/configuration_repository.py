"""
SQLAlchemy repository for news configurations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Type
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.models import (
    DefinitionType,
    NewsConfiguration,
    NewsDefinition,
    PredefinedNewsConfiguration,
    UserDefinedNewsConfiguration,
)

from .. import predicates


@dataclass
class ConfigurationFilters:
    set_id: Optional[UUID] = None
    variant: Optional[DefinitionType] = None
    definition_id: Optional[UUID] = None
    subscribe_id: Optional[str] = None
    visible_only: bool = False
    displayed_only: bool = False
    order_by_definition_name: bool = False


class ConfigurationRepository:
    """Encapsulates queries over the configurations of every set."""

    _VARIANT_MODELS: Dict[DefinitionType, Type[NewsConfiguration]] = {
        DefinitionType.PREDEFINED: PredefinedNewsConfiguration,
        DefinitionType.USER_DEFINED: UserDefinedNewsConfiguration,
    }

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @classmethod
    def model_for(cls, variant: Optional[DefinitionType]) -> Type[NewsConfiguration]:
        if variant is None:
            return NewsConfiguration
        return cls._VARIANT_MODELS[variant]

    async def fetch_by_id(self, configuration_id: UUID) -> Optional[NewsConfiguration]:
        return await self._session.get(NewsConfiguration, configuration_id)

    def _build_criteria(self, filters: ConfigurationFilters) -> List:
        criteria = []

        if filters.set_id is not None:
            criteria.append(predicates.in_set(filters.set_id))

        if filters.definition_id is not None:
            criteria.append(predicates.references_definition(filters.definition_id))

        if filters.subscribe_id is not None:
            criteria.append(predicates.subscribed_by(filters.subscribe_id))

        if filters.visible_only:
            criteria.append(predicates.visible_only())

        if filters.displayed_only:
            criteria.append(predicates.displayed())

        return criteria

    async def list_configurations(self, filters: ConfigurationFilters) -> List[NewsConfiguration]:
        model = self.model_for(filters.variant)
        stmt = select(model)

        criteria = self._build_criteria(filters)
        if criteria:
            stmt = stmt.where(and_(*criteria))

        if filters.order_by_definition_name:
            stmt = stmt.join(model.news_definition).order_by(NewsDefinition.name, model.id)

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_subscriber(self, subscribe_id: str) -> List[NewsConfiguration]:
        return await self.list_configurations(
            ConfigurationFilters(subscribe_id=subscribe_id, displayed_only=True)
        )

    async def list_for_set(
        self,
        set_id: UUID,
        variant: DefinitionType,
        *,
        visible_only: bool = False,
    ) -> List[NewsConfiguration]:
        return await self.list_configurations(
            ConfigurationFilters(
                set_id=set_id,
                variant=variant,
                visible_only=visible_only,
                order_by_definition_name=True,
            )
        )

    async def list_for_definition(
        self,
        definition_id: UUID,
        variant: Optional[DefinitionType] = None,
    ) -> List[NewsConfiguration]:
        return await self.list_configurations(
            ConfigurationFilters(definition_id=definition_id, variant=variant)
        )

    async def add(self, configuration: NewsConfiguration) -> NewsConfiguration:
        self._session.add(configuration)
        await self._session.flush()
        await self._session.refresh(configuration)
        return configuration

    async def delete(self, configuration: NewsConfiguration) -> None:
        news_set = configuration.news_set
        if news_set is not None:
            news_set.remove_configuration(configuration)
        await self._session.delete(configuration)
        await self._session.flush()

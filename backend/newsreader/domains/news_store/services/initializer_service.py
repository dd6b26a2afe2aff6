"""
Role-based initialization of news sets.

Predefined definitions fall into three disjoint groups for a given set and
role set: already subscribed, eligible for automatic addition (at least one
default role matches) and hidden (no default role matches). ``init_news``
materializes the eligible group as new configurations on the in-memory set;
persisting them is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.models import NewsSet, PredefinedNewsConfiguration, PredefinedNewsDefinition

from .. import predicates
from ..dtos import RolePartition
from ..repositories import DefinitionRepository


@dataclass
class RoleBasedInitializer:
    session: AsyncSession

    def __post_init__(self) -> None:
        self._definitions = DefinitionRepository(self.session)

    async def hidden_definitions(
        self,
        set_id: Optional[UUID],
        roles: Iterable[str],
    ) -> List[PredefinedNewsDefinition]:
        """Definitions neither present in the set nor granted by any of ``roles``."""
        return await self._definitions.list_predefined(
            predicates.not_in_set(set_id),
            ~predicates.grants_any_role(roles),
        )

    async def eligible_definitions(
        self,
        news_set: NewsSet,
        roles: Iterable[str],
    ) -> List[PredefinedNewsDefinition]:
        """Definitions absent from the set that at least one of ``roles`` grants."""
        wanted = predicates.normalize_roles(roles)
        if not wanted:
            return []

        with self.session.no_autoflush:
            candidates = await self._definitions.list_predefined(
                predicates.not_in_set(news_set.id),
                predicates.grants_any_role(wanted),
            )

        present = news_set.definition_ids
        return [definition for definition in candidates if definition.id not in present]

    @staticmethod
    def attach_defaults(
        news_set: NewsSet,
        definitions: Iterable[PredefinedNewsDefinition],
    ) -> List[PredefinedNewsConfiguration]:
        added = []
        for definition in definitions:
            if news_set.contains_definition(definition):
                continue
            configuration = PredefinedNewsConfiguration(news_definition=definition)
            news_set.add_configuration(configuration)
            added.append(configuration)
        return added

    async def init_news(
        self,
        news_set: NewsSet,
        roles: Iterable[str],
    ) -> List[PredefinedNewsConfiguration]:
        wanted = predicates.normalize_roles(roles)
        # without roles no predefined default can apply
        if not wanted:
            logger.debug(f"Skipping default population for set {news_set.id}: no roles")
            return []

        eligible = await self.eligible_definitions(news_set, wanted)
        added = self.attach_defaults(news_set, eligible)
        logger.info(
            f"Added {len(added)} default configuration(s) to set {news_set.id} "
            f"for roles {sorted(wanted)}"
        )
        return added

    async def partition(self, news_set: NewsSet, roles: Iterable[str]) -> RolePartition:
        wanted = predicates.normalize_roles(roles)
        present = news_set.definition_ids

        with self.session.no_autoflush:
            every = await self._definitions.list_predefined()
            hidden = await self.hidden_definitions(news_set.id, wanted)
        eligible = await self.eligible_definitions(news_set, wanted)

        hidden = [definition for definition in hidden if definition.id not in present]
        excluded = {definition.id for definition in hidden} | {definition.id for definition in eligible}
        return RolePartition(
            subscribed=[definition for definition in every if definition.id not in excluded],
            eligible=eligible,
            hidden=hidden,
        )

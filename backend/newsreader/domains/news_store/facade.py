"""
News store domain facade.

The facade is the single entry point calling services use to persist and query
news sets, definitions and configurations. Every public coroutine is one unit
of work. Writes run inside ``transaction_scope`` and are committed or rolled
back before the coroutine returns. Lookups run inside ``read_scope``, which
never flushes changes the caller has not stored. Nothing is retried here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.core.config import settings
from newsreader.core.database import read_scope, transaction_scope
from newsreader.core.exceptions import NotFoundError
from newsreader.models import (
    DefinitionType,
    NewsConfiguration,
    NewsDefinition,
    NewsSet,
    PredefinedNewsConfiguration,
    PredefinedNewsDefinition,
    UserDefinedNewsConfiguration,
)

from .dtos import RolePartition
from .repositories import ConfigurationRepository, DefinitionRepository, NewsSetRepository
from .services import PredefinedDefinitionSeeder, RoleBasedInitializer, load_seed_file

_DEFINITION = "NewsDefinition"
_CONFIGURATION = "NewsConfiguration"
_SET = "NewsSet"


@dataclass
class NewsStoreFacade:
    """Persistence gateway coordinating news store repositories and services."""

    session: AsyncSession

    @property
    def definitions(self) -> DefinitionRepository:
        return DefinitionRepository(self.session)

    @property
    def configurations(self) -> ConfigurationRepository:
        return ConfigurationRepository(self.session)

    @property
    def sets(self) -> NewsSetRepository:
        return NewsSetRepository(self.session)

    @property
    def initializer(self) -> RoleBasedInitializer:
        return RoleBasedInitializer(self.session)

    def _scope(self, entity: str, operation: str):
        return transaction_scope(self.session, entity=entity, operation=operation)

    def _read(self, entity: str, operation: str):
        return read_scope(self.session, entity=entity, operation=operation)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def store_definition(self, definition: NewsDefinition) -> NewsDefinition:
        async with self._scope(_DEFINITION, "store_definition"):
            stored = await self.definitions.add(definition)
        logger.info(f"Stored {type(stored).__name__} {stored.id} ({stored.name})")
        return stored

    async def store_configuration(self, configuration: NewsConfiguration) -> NewsConfiguration:
        async with self._scope(_CONFIGURATION, "store_configuration"):
            stored = await self.configurations.add(configuration)
        logger.info(f"Stored {type(stored).__name__} {stored.id} in set {stored.news_set_id}")
        return stored

    async def store_set(self, news_set: NewsSet) -> NewsSet:
        async with self._scope(_SET, "store_set"):
            stored = await self.sets.add(news_set)
        logger.info(f"Stored news set {stored.id} for user {stored.user_id}")
        return stored

    async def delete_configuration(self, configuration: NewsConfiguration) -> None:
        configuration_id = configuration.id
        async with self._scope(_CONFIGURATION, "delete_configuration"):
            await self.configurations.delete(configuration)
        logger.info(f"Deleted configuration {configuration_id}")

    async def delete_definition(self, definition: NewsDefinition) -> None:
        """
        Delete a definition.

        For a predefined definition every predefined configuration referencing
        it, in any set, is deleted first within the same transaction. A
        user-defined definition is deleted as is; the store rejects the delete
        with ``ReferentialViolationError`` while configurations still use it.
        """
        definition_id = definition.id
        removed = 0
        async with self._scope(_DEFINITION, "delete_definition"):
            if isinstance(definition, PredefinedNewsDefinition):
                dependents = await self.configurations.list_for_definition(
                    definition_id,
                    DefinitionType.PREDEFINED,
                )
                for configuration in dependents:
                    await self.configurations.delete(configuration)
                removed = len(dependents)
            await self.definitions.delete(definition)
        logger.info(f"Deleted definition {definition_id} and {removed} dependent configuration(s)")

    async def delete_set(self, news_set: NewsSet) -> None:
        set_id = news_set.id
        async with self._scope(_SET, "delete_set"):
            await self.sets.delete(news_set)
        logger.info(f"Deleted news set {set_id}")

    # ------------------------------------------------------------------
    # Definition lookups
    # ------------------------------------------------------------------
    async def get_definition(self, definition_id: UUID) -> Optional[NewsDefinition]:
        async with self._read(_DEFINITION, "get_definition"):
            return await self.definitions.fetch_by_id(definition_id)

    async def get_predefined_definition(self, definition_id: UUID) -> Optional[PredefinedNewsDefinition]:
        async with self._read(_DEFINITION, "get_predefined_definition"):
            return await self.definitions.fetch_predefined_by_id(definition_id)

    async def get_predefined_definition_by_name(self, name: str) -> Optional[PredefinedNewsDefinition]:
        async with self._read(_DEFINITION, "get_predefined_definition_by_name"):
            return await self.definitions.fetch_predefined_by_name(name)

    async def list_predefined_definitions(self) -> List[PredefinedNewsDefinition]:
        async with self._read(_DEFINITION, "list_predefined_definitions"):
            return await self.definitions.list_predefined()

    async def list_distinct_roles(self) -> List[str]:
        async with self._read(_DEFINITION, "list_distinct_roles"):
            return await self.definitions.list_distinct_roles()

    async def get_hidden_predefined_definitions(
        self,
        set_id: UUID,
        roles: Iterable[str],
    ) -> List[PredefinedNewsDefinition]:
        logger.debug(f"Fetching hidden predefined definitions for set {set_id}")
        async with self._read(_DEFINITION, "get_hidden_predefined_definitions"):
            return await self.initializer.hidden_definitions(set_id, roles)

    # ------------------------------------------------------------------
    # Configuration lookups
    # ------------------------------------------------------------------
    async def get_configuration(self, configuration_id: UUID) -> NewsConfiguration:
        async with self._read(_CONFIGURATION, "get_configuration"):
            configuration = await self.configurations.fetch_by_id(configuration_id)
        if configuration is None:
            raise NotFoundError(_CONFIGURATION, configuration_id, operation="get_configuration")
        return configuration

    async def list_configurations_by_subscriber(self, subscribe_id: str) -> List[NewsConfiguration]:
        logger.debug(f"Fetching news configurations for {subscribe_id}")
        async with self._read(_CONFIGURATION, "list_configurations_by_subscriber"):
            return await self.configurations.list_by_subscriber(subscribe_id)

    async def list_user_defined_configurations(
        self,
        set_id: UUID,
        visible_only: bool = False,
    ) -> List[UserDefinedNewsConfiguration]:
        async with self._read(_CONFIGURATION, "list_user_defined_configurations"):
            return await self.configurations.list_for_set(
                set_id,
                DefinitionType.USER_DEFINED,
                visible_only=visible_only,
            )

    async def list_predefined_configurations(
        self,
        set_id: UUID,
        visible_only: bool = False,
    ) -> List[PredefinedNewsConfiguration]:
        async with self._read(_CONFIGURATION, "list_predefined_configurations"):
            return await self.configurations.list_for_set(
                set_id,
                DefinitionType.PREDEFINED,
                visible_only=visible_only,
            )

    async def list_configurations_for_definition(self, definition_id: UUID) -> List[NewsConfiguration]:
        async with self._read(_CONFIGURATION, "list_configurations_for_definition"):
            return await self.configurations.list_for_definition(definition_id)

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------
    async def get_set(self, set_id: UUID) -> Optional[NewsSet]:
        async with self._read(_SET, "get_set"):
            return await self.sets.fetch_by_id(set_id)

    async def get_set_by_name(self, user_id: str, set_name: str) -> Optional[NewsSet]:
        logger.debug(f"Fetching news set '{set_name}' for {user_id}")
        async with self._read(_SET, "get_set_by_name"):
            return await self.sets.fetch_by_name(user_id, set_name)

    async def get_sets_for_user(self, user_id: str) -> List[NewsSet]:
        logger.debug(f"Fetching news sets for {user_id}")
        async with self._read(_SET, "get_sets_for_user"):
            return await self.sets.list_for_user(user_id)

    # ------------------------------------------------------------------
    # Role-based initialization
    # ------------------------------------------------------------------
    async def init_news(
        self,
        news_set: NewsSet,
        roles: Iterable[str],
    ) -> List[PredefinedNewsConfiguration]:
        """
        Add default predefined configurations to ``news_set`` in memory.

        The additions are not flushed here, and the read-only lookups of this
        facade leave them unflushed too; call ``store_set`` to make them
        durable, possibly after further changes to the same set.
        """
        async with self._read(_SET, "init_news"):
            return await self.initializer.init_news(news_set, roles)

    async def initialize_set(
        self,
        news_set: NewsSet,
        roles: Iterable[str],
    ) -> List[PredefinedNewsConfiguration]:
        added = await self.init_news(news_set, roles)
        await self.store_set(news_set)
        logger.info(f"Initialized news set {news_set.id} with {len(added)} default configuration(s)")
        return added

    async def get_role_partition(self, news_set: NewsSet, roles: Iterable[str]) -> RolePartition:
        async with self._read(_SET, "get_role_partition"):
            return await self.initializer.partition(news_set, roles)

    async def get_or_create_set(
        self,
        user_id: str,
        roles: Iterable[str],
        set_name: Optional[str] = None,
    ) -> NewsSet:
        """Return the user's named set, creating and initializing it on first use."""
        name = set_name or settings.DEFAULT_SET_NAME
        news_set = await self.get_set_by_name(user_id, name)
        if news_set is not None:
            return news_set

        news_set = NewsSet(user_id=user_id, name=name)
        await self.initialize_set(news_set, roles)
        return news_set

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------
    async def seed_predefined_definitions(
        self,
        path: Union[str, Path, None] = None,
    ) -> List[PredefinedNewsDefinition]:
        seed_path = path or settings.PREDEFINED_DEFINITIONS_PATH
        if not seed_path:
            logger.warning("No predefined definitions file configured; nothing to seed")
            return []

        entries = load_seed_file(seed_path)
        async with self._scope(_DEFINITION, "seed_predefined_definitions"):
            return await PredefinedDefinitionSeeder(self.session).seed(entries)

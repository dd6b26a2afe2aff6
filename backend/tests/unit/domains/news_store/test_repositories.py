from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.domains.news_store.repositories import (
    ConfigurationFilters,
    ConfigurationRepository,
    DefinitionRepository,
    NewsSetRepository,
)
from newsreader.models import (
    DefinitionType,
    NewsSet,
    PredefinedNewsConfiguration,
    PredefinedNewsDefinition,
    UserDefinedNewsConfiguration,
    UserDefinedNewsDefinition,
)


async def _create_set_with_feeds(session: AsyncSession) -> NewsSet:
    news_set = NewsSet(user_id="student1", name="default")
    zeta = PredefinedNewsDefinition(name="Zeta", default_roles={"student"})
    alpha = PredefinedNewsDefinition(name="Alpha", default_roles={"staff", "student"})
    blog = UserDefinedNewsDefinition(name="Blog", parameters={"url": "https://blog.example.org/rss"})
    news_set.add_configuration(PredefinedNewsConfiguration(news_definition=zeta, subscribe_id="sub-1"))
    news_set.add_configuration(
        PredefinedNewsConfiguration(news_definition=alpha, visible_only=False, subscribe_id="sub-1")
    )
    news_set.add_configuration(
        UserDefinedNewsConfiguration(news_definition=blog, displayed=False, subscribe_id="sub-1")
    )
    session.add(news_set)
    await session.commit()
    return news_set


@pytest.mark.asyncio
async def test_definition_repository_resolves_variant_on_fetch(async_session: AsyncSession) -> None:
    repo = DefinitionRepository(async_session)
    predefined = await repo.add(PredefinedNewsDefinition(name="Campus"))
    user_defined = await repo.add(UserDefinedNewsDefinition(name="Campus"))
    await async_session.commit()
    async_session.expunge_all()

    fetched = await repo.fetch_by_id(predefined.id)
    assert isinstance(fetched, PredefinedNewsDefinition)

    fetched = await repo.fetch_by_id(user_defined.id)
    assert isinstance(fetched, UserDefinedNewsDefinition)

    assert await repo.fetch_predefined_by_id(user_defined.id) is None
    by_name = await repo.fetch_predefined_by_name("Campus")
    assert by_name is not None
    assert by_name.id == predefined.id


@pytest.mark.asyncio
async def test_definition_repository_lists_distinct_roles(async_session: AsyncSession) -> None:
    repo = DefinitionRepository(async_session)
    await repo.add(PredefinedNewsDefinition(name="A", default_roles={"student", "staff"}))
    await repo.add(PredefinedNewsDefinition(name="B", default_roles={"student"}))
    await repo.add(PredefinedNewsDefinition(name="C"))

    assert await repo.list_distinct_roles() == ["staff", "student"]


@pytest.mark.asyncio
async def test_role_entries_round_trip_through_storage(async_session: AsyncSession) -> None:
    repo = DefinitionRepository(async_session)
    definition = await repo.add(PredefinedNewsDefinition(name="Campus", default_roles={"student"}))
    await async_session.commit()
    definition_id = definition.id
    async_session.expunge_all()

    stored = await repo.fetch_predefined_by_id(definition_id)
    stored.default_roles = {"staff", "faculty"}
    await repo.add(stored)
    await async_session.commit()
    async_session.expunge_all()

    reloaded = await repo.fetch_predefined_by_id(definition_id)
    assert reloaded.default_roles == {"staff", "faculty"}


@pytest.mark.asyncio
async def test_list_for_set_orders_by_definition_name(async_session: AsyncSession) -> None:
    news_set = await _create_set_with_feeds(async_session)
    repo = ConfigurationRepository(async_session)

    predefined = await repo.list_for_set(news_set.id, DefinitionType.PREDEFINED)
    assert [config.news_definition.name for config in predefined] == ["Alpha", "Zeta"]
    assert all(isinstance(config, PredefinedNewsConfiguration) for config in predefined)

    user_defined = await repo.list_for_set(news_set.id, DefinitionType.USER_DEFINED)
    assert [config.news_definition.name for config in user_defined] == ["Blog"]


@pytest.mark.asyncio
async def test_list_for_set_honours_visible_only(async_session: AsyncSession) -> None:
    news_set = await _create_set_with_feeds(async_session)
    repo = ConfigurationRepository(async_session)

    visible = await repo.list_for_set(news_set.id, DefinitionType.PREDEFINED, visible_only=True)

    assert [config.news_definition.name for config in visible] == ["Zeta"]


@pytest.mark.asyncio
async def test_list_by_subscriber_returns_displayed_only(async_session: AsyncSession) -> None:
    await _create_set_with_feeds(async_session)
    repo = ConfigurationRepository(async_session)

    configurations = await repo.list_by_subscriber("sub-1")

    assert len(configurations) == 2
    assert all(config.displayed for config in configurations)
    assert await repo.list_by_subscriber("unknown") == []


@pytest.mark.asyncio
async def test_list_configurations_combines_filters(async_session: AsyncSession) -> None:
    news_set = await _create_set_with_feeds(async_session)
    repo = ConfigurationRepository(async_session)

    configurations = await repo.list_configurations(
        ConfigurationFilters(set_id=news_set.id, displayed_only=True, visible_only=True)
    )

    assert [config.news_definition.name for config in configurations] == ["Zeta"]


@pytest.mark.asyncio
async def test_list_for_definition_spans_sets(async_session: AsyncSession) -> None:
    definition = PredefinedNewsDefinition(name="Campus")
    first = NewsSet(user_id="student1", name="default")
    second = NewsSet(user_id="student2", name="default")
    for news_set in (first, second):
        news_set.add_configuration(PredefinedNewsConfiguration(news_definition=definition))
    async_session.add_all([first, second])
    await async_session.commit()

    repo = ConfigurationRepository(async_session)
    dependents = await repo.list_for_definition(definition.id)

    assert {config.news_set_id for config in dependents} == {first.id, second.id}
    assert await repo.list_for_definition(definition.id, DefinitionType.USER_DEFINED) == []


@pytest.mark.asyncio
async def test_set_repository_lists_sets_by_name(async_session: AsyncSession) -> None:
    repo = NewsSetRepository(async_session)
    await repo.add(NewsSet(user_id="student1", name="work"))
    await repo.add(NewsSet(user_id="student1", name="default"))
    await repo.add(NewsSet(user_id="other", name="default"))

    sets = await repo.list_for_user("student1")

    assert [news_set.name for news_set in sets] == ["default", "work"]
    found = await repo.fetch_by_name("other", "default")
    assert found is not None
    assert found.user_id == "other"
    assert await repo.fetch_by_name("student1", "missing") is None

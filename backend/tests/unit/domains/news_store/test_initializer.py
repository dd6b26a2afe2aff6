from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsreader.domains.news_store import NewsStoreFacade, RoleBasedInitializer
from newsreader.models import NewsSet, PredefinedNewsConfiguration, PredefinedNewsDefinition


async def _create_catalogue(make_predefined):
    campus = await make_predefined("Campus", roles={"student"})
    library = await make_predefined("Library", roles={"student", "staff"})
    payroll = await make_predefined("Payroll", roles={"staff"})
    archive = await make_predefined("Archive")
    return campus, library, payroll, archive


@pytest.mark.asyncio
async def test_init_news_without_roles_is_a_no_op(news_store: NewsStoreFacade, make_predefined, make_set) -> None:
    await _create_catalogue(make_predefined)
    news_set = await make_set()

    assert await news_store.init_news(news_set, []) == []
    assert await news_store.init_news(news_set, None) == []
    assert news_set.configurations == []


@pytest.mark.asyncio
async def test_init_news_adds_definitions_granted_by_roles(
    news_store: NewsStoreFacade,
    make_predefined,
    make_set,
) -> None:
    campus, library, payroll, archive = await _create_catalogue(make_predefined)
    news_set = await make_set()

    added = await news_store.init_news(news_set, ["student"])

    assert [config.news_definition.name for config in added] == ["Campus", "Library"]
    assert all(isinstance(config, PredefinedNewsConfiguration) for config in added)
    assert news_set.definition_ids == {campus.id, library.id}

    hidden = await news_store.get_hidden_predefined_definitions(news_set.id, ["student"])
    assert [definition.name for definition in hidden] == ["Archive", "Payroll"]


@pytest.mark.asyncio
async def test_init_news_is_idempotent(news_store: NewsStoreFacade, make_predefined, make_set) -> None:
    await _create_catalogue(make_predefined)
    news_set = await make_set()

    first = await news_store.init_news(news_set, ["student"])
    second = await news_store.init_news(news_set, ["student"])
    await news_store.store_set(news_set)
    third = await news_store.init_news(news_set, ["student", " student "])

    assert len(first) == 2
    assert second == []
    assert third == []
    assert len(news_set.configurations) == 2


@pytest.mark.asyncio
async def test_init_news_keeps_existing_configurations(
    news_store: NewsStoreFacade,
    make_predefined,
    make_set,
) -> None:
    campus, library, payroll, _ = await _create_catalogue(make_predefined)
    news_set = await make_set()
    existing = await news_store.store_configuration(
        PredefinedNewsConfiguration(news_definition=campus, news_set=news_set, displayed=False)
    )

    added = await news_store.init_news(news_set, ["student", "staff"])

    assert [config.news_definition.name for config in added] == ["Library", "Payroll"]
    assert existing in news_set.configurations
    assert existing.displayed is False


@pytest.mark.asyncio
async def test_initialize_set_persists_defaults(
    news_store: NewsStoreFacade,
    async_session: AsyncSession,
    make_predefined,
) -> None:
    await _create_catalogue(make_predefined)
    news_set = NewsSet(user_id="staff1", name="default")

    added = await news_store.initialize_set(news_set, {"staff"})
    set_id = news_set.id
    async_session.expunge_all()

    stored = await news_store.list_predefined_configurations(set_id)
    assert [config.news_definition.name for config in stored] == ["Library", "Payroll"]
    assert len(added) == 2


@pytest.mark.asyncio
async def test_hidden_definitions_without_roles_lists_every_absent_definition(
    news_store: NewsStoreFacade,
    make_predefined,
    make_set,
) -> None:
    await _create_catalogue(make_predefined)
    news_set = await make_set()

    hidden = await news_store.get_hidden_predefined_definitions(news_set.id, [])

    assert [definition.name for definition in hidden] == ["Archive", "Campus", "Library", "Payroll"]


@pytest.mark.asyncio
async def test_role_partition_is_disjoint_and_complete(
    news_store: NewsStoreFacade,
    make_predefined,
    make_set,
) -> None:
    campus, library, payroll, archive = await _create_catalogue(make_predefined)
    news_set = await make_set()
    await news_store.store_configuration(
        PredefinedNewsConfiguration(news_definition=payroll, news_set=news_set)
    )

    partition = await news_store.get_role_partition(news_set, ["student"])

    assert partition.subscribed_ids == {payroll.id}
    assert partition.eligible_ids == {campus.id, library.id}
    assert partition.hidden_ids == {archive.id}
    assert not (partition.subscribed_ids & partition.eligible_ids)
    assert not (partition.eligible_ids & partition.hidden_ids)


@pytest.mark.asyncio
async def test_attach_defaults_skips_definitions_already_present(make_predefined) -> None:
    campus = await make_predefined("Campus", roles={"student"})
    news_set = NewsSet(user_id="student1", name="default")

    first = RoleBasedInitializer.attach_defaults(news_set, [campus, campus])
    second = RoleBasedInitializer.attach_defaults(news_set, [campus])

    assert len(first) == 1
    assert second == []


@pytest.mark.asyncio
async def test_lookups_after_init_news_do_not_persist_additions(
    news_store: NewsStoreFacade,
    async_session: AsyncSession,
    async_session_factory: async_sessionmaker[AsyncSession],
    make_predefined,
    make_set,
) -> None:
    await make_predefined("Campus", roles={"student"})
    news_set = await make_set()
    set_id = news_set.id

    added = await news_store.init_news(news_set, ["student"])
    await news_store.list_distinct_roles()
    await news_store.get_hidden_predefined_definitions(set_id, ["student"])
    await news_store.list_predefined_configurations(set_id)
    await async_session.rollback()

    assert len(added) == 1
    async with async_session_factory() as fresh:
        assert await NewsStoreFacade(fresh).list_predefined_configurations(set_id) == []


@pytest.mark.asyncio
async def test_store_set_after_lookups_persists_init_news_additions(
    news_store: NewsStoreFacade,
    async_session_factory: async_sessionmaker[AsyncSession],
    make_predefined,
    make_set,
) -> None:
    await make_predefined("Campus", roles={"student"})
    news_set = await make_set()
    set_id = news_set.id

    await news_store.init_news(news_set, ["student"])
    await news_store.list_distinct_roles()
    await news_store.store_set(news_set)

    async with async_session_factory() as fresh:
        stored = await NewsStoreFacade(fresh).list_predefined_configurations(set_id)
    assert [config.news_definition.name for config in stored] == ["Campus"]


def test_attach_defaults_matches_unflushed_definitions_by_identity() -> None:
    campus = PredefinedNewsDefinition(name="Campus", default_roles={"student"})
    news_set = NewsSet(user_id="student1", name="default")

    first = RoleBasedInitializer.attach_defaults(news_set, [campus, campus])
    second = RoleBasedInitializer.attach_defaults(news_set, [campus])

    assert campus.id is None
    assert len(first) == 1
    assert second == []
    assert news_set.contains_definition(campus)
    assert not news_set.contains_definition(PredefinedNewsDefinition(name="Campus"))

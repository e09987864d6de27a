"""Unit tests for fact read use cases."""

import pytest

from onlyfacts.application.usecase.fact import (
    CreateFactRequest,
    CreateFactUseCase,
    GetCurrentFactUseCase,
    GetFactRequest,
    GetFactUseCase,
)
from onlyfacts.domain.error import NotFoundError
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetCurrentFactUseCase:
    """Tests for GetCurrentFactUseCase."""

    @pytest.mark.asyncio
    async def test_no_fact_published(self, unit_env):
        get_current_fact = await unit_env.get(GetCurrentFactUseCase)

        assert await get_current_fact.execute() is None

    @pytest.mark.asyncio
    async def test_latest_created_fact_is_current(self, unit_env):
        # Arrange
        create_fact = await unit_env.get(CreateFactUseCase)
        get_current_fact = await unit_env.get(GetCurrentFactUseCase)
        await create_fact.execute(CreateFactRequest(content="First fact."))
        second = await create_fact.execute(CreateFactRequest(content="Second fact."))

        # Act
        current = await get_current_fact.execute()

        # Assert
        assert current is not None
        assert current.id == second.id
        assert current.content == "Second fact."


class TestGetFactUseCase:
    """Tests for GetFactUseCase."""

    @pytest.mark.asyncio
    async def test_get_existing_fact(self, unit_env):
        create_fact = await unit_env.get(CreateFactUseCase)
        get_fact = await unit_env.get(GetFactUseCase)
        created = await create_fact.execute(CreateFactRequest(content="A fact."))

        fact = await get_fact.execute(GetFactRequest(fact_id=created.id))

        assert fact == created

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, unit_env):
        get_fact = await unit_env.get(GetFactUseCase)

        with pytest.raises(NotFoundError):
            await get_fact.execute(GetFactRequest(fact_id="12345"))

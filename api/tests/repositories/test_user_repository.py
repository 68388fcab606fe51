"""Tests for UserRepository."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from repositories.user_repository import UserRepository
from tests.factories import UserFactory, create_async, create_batch_async

pytestmark = pytest.mark.integration


class TestUserRepositoryLookups:
    async def test_get_by_id(self, db_session: AsyncSession):
        user = await create_async(UserFactory, db_session)
        repo = UserRepository(db_session)

        result = await repo.get_by_id(user.id)

        assert result is not None
        assert result.user_name == user.user_name

    async def test_get_by_id_ignores_deleted(self, db_session: AsyncSession):
        user = await create_async(UserFactory, db_session, is_deleted=True)
        repo = UserRepository(db_session)

        assert await repo.get_by_id(user.id) is None

    async def test_get_by_user_name_is_case_sensitive(self, db_session: AsyncSession):
        await create_async(UserFactory, db_session, user_name="Mafuyu")
        repo = UserRepository(db_session)

        assert await repo.get_by_user_name("Mafuyu") is not None
        assert await repo.get_by_user_name("mafuyu") is None


class TestUserRepositoryListPage:
    async def test_last_partial_page(self, db_session: AsyncSession):
        await create_batch_async(UserFactory, db_session, 7)
        repo = UserRepository(db_session)

        page = await repo.list_page(offset=6, limit=3)

        assert page.total == 7
        assert len(page.items) == 1


class TestUserRepositoryWrites:
    async def test_add_and_reuse_deleted_name(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        first = await repo.add(User(user_name="kanade", password="pw"))
        await repo.soft_delete(first)

        second = await repo.add(User(user_name="kanade", password="pw2"))

        assert second.id != first.id
        assert (await repo.get_by_user_name("kanade")).id == second.id

    async def test_live_name_unique_index(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        await repo.add(User(user_name="ena", password="pw"))

        with pytest.raises(IntegrityError):
            await repo.add(User(user_name="ena", password="pw"))

        await db_session.rollback()

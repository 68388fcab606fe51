"""User repository for database operations."""

from sqlalchemy import false, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import DEFAULT_ACTOR, User
from repositories.utils import Page, count_rows, log_slow_query


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a live user by ID."""
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_deleted == false())
        )
        return result.scalar_one_or_none()

    async def get_by_user_name(self, user_name: str) -> User | None:
        """Get the live user holding this name, if any.

        Names are compared exactly; the unique index only covers live rows.
        """
        result = await self.db.execute(
            select(User).where(User.user_name == user_name, User.is_deleted == false())
        )
        return result.scalar_one_or_none()

    @log_slow_query("user_list_page")
    async def list_page(self, offset: int, limit: int) -> Page[User]:
        stmt = select(User).where(User.is_deleted == false())
        total = await count_rows(self.db, stmt)
        result = await self.db.execute(
            stmt.order_by(User.user_name, User.id).offset(offset).limit(limit)
        )
        return Page(items=list(result.scalars().all()), total=total)

    async def add(self, user: User, actor: str = DEFAULT_ACTOR) -> User:
        user.mark_created(actor)
        self.db.add(user)
        await self.db.flush()
        return user

    async def save(self, user: User, actor: str = DEFAULT_ACTOR) -> User:
        user.mark_updated(actor)
        await self.db.flush()
        return user

    async def soft_delete(self, user: User, actor: str = DEFAULT_ACTOR) -> None:
        user.mark_deleted(actor)
        await self.db.flush()

"""Artist repository for database operations."""

from sqlalchemy import false, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import DEFAULT_ACTOR, Artist
from repositories.utils import Page, count_rows, log_slow_query


class ArtistRepository:
    """Repository for Artist database operations.

    Every lookup only sees rows that are not soft-deleted.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, artist_id: int) -> Artist | None:
        """Get a live artist by ID."""
        result = await self.db.execute(
            select(Artist).where(Artist.id == artist_id, Artist.is_deleted == false())
        )
        return result.scalar_one_or_none()

    async def get_by_artist_name(self, artist_name: str) -> Artist | None:
        """Get the live artist holding this (exact) name, if any."""
        result = await self.db.execute(
            select(Artist).where(
                Artist.artist_name == artist_name,
                Artist.is_deleted == false(),
            )
        )
        return result.scalar_one_or_none()

    @log_slow_query("artist_list_page")
    async def list_page(self, offset: int, limit: int) -> Page[Artist]:
        """List live artists ordered by name, with the total live count."""
        stmt = select(Artist).where(Artist.is_deleted == false())
        total = await count_rows(self.db, stmt)
        result = await self.db.execute(
            stmt.order_by(Artist.artist_name, Artist.id).offset(offset).limit(limit)
        )
        return Page(items=list(result.scalars().all()), total=total)

    async def add(self, artist: Artist, actor: str = DEFAULT_ACTOR) -> Artist:
        """Stamp audit fields and insert. Flushes so the ID is available.

        Raises IntegrityError when the live-name unique index is violated.
        """
        artist.mark_created(actor)
        self.db.add(artist)
        await self.db.flush()
        return artist

    async def save(self, artist: Artist, actor: str = DEFAULT_ACTOR) -> Artist:
        """Stamp update audit fields and flush pending changes."""
        artist.mark_updated(actor)
        await self.db.flush()
        return artist

    async def soft_delete(self, artist: Artist, actor: str = DEFAULT_ACTOR) -> None:
        """Mark the artist deleted; the row stays in the table."""
        artist.mark_deleted(actor)
        await self.db.flush()

"""Track (prsk music) repository for database operations."""

from sqlalchemy import false, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from models import DEFAULT_ACTOR, MusicType, Track
from repositories.utils import Page, count_rows, log_slow_query


class TrackRepository:
    """Repository for Track database operations.

    Lookups that return tracks for display join the artist in the same query,
    including soft-deleted artists (the response falls back to "Unknown").
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, track_id: int) -> Track | None:
        """Get a live track by ID with its artist loaded."""
        result = await self.db.execute(
            select(Track)
            .options(joinedload(Track.artist))
            .where(Track.id == track_id, Track.is_deleted == false())
        )
        return result.scalar_one_or_none()

    async def get_by_title_and_music_type(
        self, title: str, music_type: MusicType
    ) -> Track | None:
        """Get the live track holding this (title, music_type) key, if any."""
        result = await self.db.execute(
            select(Track).where(
                Track.title == title,
                Track.music_type == music_type,
                Track.is_deleted == false(),
            )
        )
        return result.scalar_one_or_none()

    @log_slow_query("track_list_page")
    async def list_page(self, offset: int, limit: int) -> Page[Track]:
        """List live tracks ordered by title, artists joined in one query."""
        stmt = select(Track).where(Track.is_deleted == false())
        total = await count_rows(self.db, stmt)
        result = await self.db.execute(
            stmt.options(joinedload(Track.artist))
            .order_by(Track.title, Track.id)
            .offset(offset)
            .limit(limit)
        )
        return Page(items=list(result.scalars().all()), total=total)

    async def add(self, track: Track, actor: str = DEFAULT_ACTOR) -> Track:
        """Stamp audit fields and insert. Flushes so the ID is available.

        Raises IntegrityError when the live (title, music_type) index is violated.
        """
        track.mark_created(actor)
        self.db.add(track)
        await self.db.flush()
        return track

    async def save(self, track: Track, actor: str = DEFAULT_ACTOR) -> Track:
        """Stamp update audit fields and flush pending changes."""
        track.mark_updated(actor)
        await self.db.flush()
        return track

    async def soft_delete(self, track: Track, actor: str = DEFAULT_ACTOR) -> None:
        """Mark the track deleted; the row stays in the table."""
        track.mark_deleted(actor)
        await self.db.flush()

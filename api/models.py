"""SQLAlchemy models for the artist, track and user master tables."""

from datetime import UTC, datetime
from enum import IntEnum
from typing import Any, Self

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from core.database import Base

# Audit actor used until an authentication system exists
DEFAULT_ACTOR = "guest"

# Primary and foreign keys are int4 columns
MAX_ID = 2**31 - 1

# Partial index predicates: uniqueness only applies to live rows
_ACTIVE_ROWS_PG = text("is_deleted = false")
_ACTIVE_ROWS_SQLITE = text("is_deleted = 0")


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class InvalidMusicTypeError(ValueError):
    """Raised when an integer code does not name a MusicType."""

    def __init__(self, code: Any):
        self.code = code
        super().__init__(f"Invalid MusicType: {code}")


class MusicType(IntEnum):
    """Kind of music video a track ships with, stored as its integer code."""

    ORIGINAL = 0
    THREE_D_MV = 1
    TWO_D_MV = 2

    @property
    def display_name(self) -> str:
        return _MUSIC_TYPE_DISPLAY_NAMES[self]

    @classmethod
    def from_code(cls, code: Any) -> Self:
        """Decode an integer code; never falls back to a default member."""
        if isinstance(code, bool) or not isinstance(code, int):
            raise InvalidMusicTypeError(code)
        try:
            return cls(code)
        except ValueError:
            raise InvalidMusicTypeError(code) from None


_MUSIC_TYPE_DISPLAY_NAMES = {
    MusicType.ORIGINAL: "original",
    MusicType.THREE_D_MV: "3DMV",
    MusicType.TWO_D_MV: "2DMV",
}


class MusicTypeCode(TypeDecorator[MusicType]):
    """Persists MusicType as its integer code and decodes it strictly."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(MusicType.from_code(int(value)))

    def process_result_value(self, value: Any, dialect: Any) -> MusicType | None:
        if value is None:
            return None
        return MusicType.from_code(value)


class UtcDateTime(TypeDecorator[datetime]):
    """Timezone-aware DateTime that always loads as UTC.

    SQLite drops the offset on storage; PostgreSQL already returns aware values.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value: Any, dialect: Any) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class AuditMixin:
    """Audit metadata and the soft-delete flag shared by every master table.

    Repositories call mark_created() before the first flush and mark_updated()
    before every later one; nothing is stamped implicitly.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(UtcDateTime(), default=utcnow, nullable=False)

    @declared_attr
    def created_by(cls) -> Mapped[str]:
        return mapped_column(String(255), default=DEFAULT_ACTOR, nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(UtcDateTime(), default=utcnow, nullable=False)

    @declared_attr
    def updated_by(cls) -> Mapped[str]:
        return mapped_column(String(255), default=DEFAULT_ACTOR, nullable=False)

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(Boolean, default=False, nullable=False)

    def mark_created(self, actor: str = DEFAULT_ACTOR) -> None:
        now = utcnow()
        self.created_at = now
        self.created_by = actor
        self.updated_at = now
        self.updated_by = actor
        self.is_deleted = False

    def mark_updated(self, actor: str = DEFAULT_ACTOR) -> None:
        self.updated_at = utcnow()
        self.updated_by = actor

    def mark_deleted(self, actor: str = DEFAULT_ACTOR) -> None:
        self.is_deleted = True
        self.mark_updated(actor)


class Artist(AuditMixin, Base):
    """Artist master record (a unit or a solo artist)."""

    __tablename__ = "artists"
    __table_args__ = (
        Index(
            "uq_artists_artist_name_active",
            "artist_name",
            unique=True,
            postgresql_where=_ACTIVE_ROWS_PG,
            sqlite_where=_ACTIVE_ROWS_SQLITE,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    artist_name: Mapped[str] = mapped_column(String(50), nullable=False)
    unit_name: Mapped[str | None] = mapped_column(String(25), nullable=True)
    content: Mapped[str | None] = mapped_column(String(20), nullable=True)


class Track(AuditMixin, Base):
    """A music track, unique per (title, music_type) among live rows."""

    __tablename__ = "prsk_music"
    __table_args__ = (
        Index(
            "uq_prsk_music_title_music_type_active",
            "title",
            "music_type",
            unique=True,
            postgresql_where=_ACTIVE_ROWS_PG,
            sqlite_where=_ACTIVE_ROWS_SQLITE,
        ),
        Index("ix_prsk_music_artist", "artist_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(30), nullable=False)
    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id"),
        nullable=False,
    )
    music_type: Mapped[MusicType] = mapped_column(MusicTypeCode(), nullable=False)
    specially: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    lyrics_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    music_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    featuring: Mapped[str | None] = mapped_column(String(10), nullable=True)
    youtube_link: Mapped[str] = mapped_column(String(100), nullable=False)

    # Always loaded explicitly (joinedload) so async sessions never lazy-load
    artist: Mapped["Artist"] = relationship(lazy="raise")


class User(AuditMixin, Base):
    """Application user. The password is stored and compared as plain text."""

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_user_name_active",
            "user_name",
            unique=True,
            postgresql_where=_ACTIVE_ROWS_PG,
            sqlite_where=_ACTIVE_ROWS_SQLITE,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_name: Mapped[str] = mapped_column(String(20), nullable=False)
    password: Mapped[str] = mapped_column(String(20), nullable=False)

"""Pydantic schemas for API request/response validation.

Field names are snake_case in Python and camelCase on the wire.
"""

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models import MAX_ID, MusicType


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, snake_case attribute names accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _require_text(value: Any, message: str) -> Any:
    """Reject null and whitespace-only strings with a field-specific message."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)
    return value


def _reject_blank(value: Any, message: str) -> Any:
    """Like _require_text, but null is allowed (patch semantics)."""
    if isinstance(value, str) and not value.strip():
        raise ValueError(message)
    return value


def _decode_music_type(value: Any) -> MusicType:
    if isinstance(value, MusicType):
        return value
    return MusicType.from_code(value)


# (field, pydantic error type) -> message returned in error details
VALIDATION_MESSAGES: dict[tuple[str, str], str] = {
    ("artistName", "missing"): "The artist name is required.",
    ("artistName", "string_too_long"): (
        "Please enter the artist name within 50 characters."
    ),
    ("unitName", "string_too_long"): "Please enter the unit name within 25 characters.",
    ("content", "string_too_long"): "Please enter the content within 20 characters.",
    ("title", "missing"): "The music title is required.",
    ("title", "string_too_long"): "Please enter the music title within 30 characters.",
    ("artistId", "missing"): "The artist id is required.",
    ("artistId", "less_than_equal"): f"The artist id must not exceed {MAX_ID}.",
    ("musicType", "missing"): "The music type is required.",
    ("lyricsName", "string_too_long"): (
        "Please enter the lyrics name within 50 characters."
    ),
    ("musicName", "string_too_long"): (
        "Please enter the music name within 50 characters."
    ),
    ("featuring", "string_too_long"): (
        "Please enter the featuring within 10 characters."
    ),
    ("youtubeLink", "missing"): "The YouTube link is required.",
    ("youtubeLink", "string_too_long"): (
        "Please enter the YouTube link within 100 characters."
    ),
    ("userName", "missing"): "The user name is required.",
    ("userName", "string_too_long"): "Please enter the user name within 20 characters.",
    ("password", "missing"): "The password is required.",
    ("password", "string_too_long"): "Please enter the password within 20 characters.",
    ("newPassword", "string_too_long"): (
        "Please enter the new password within 20 characters."
    ),
    ("page", "greater_than_equal"): "Page must be 1 or greater",
    ("page", "less_than_equal"): f"Page must not exceed {MAX_ID}",
    ("limit", "greater_than_equal"): "Limit must be at least 1",
    ("limit", "less_than_equal"): "Limit must not exceed 100",
    ("id", "greater_than_equal"): "ID must be 1 or greater.",
    ("id", "less_than_equal"): f"ID must not exceed {MAX_ID}.",
}


# =============================================================================
# Shared response blocks
# =============================================================================


class AuditInfo(CamelModel):
    """Audit metadata attached to every entity response."""

    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    created_by: str
    updated_at: datetime
    updated_by: str


class PageMeta(CamelModel):
    """Pagination metadata; page_index is zero-based."""

    total_items: int
    total_pages: int
    page_index: int
    limit: int

    @classmethod
    def build(cls, total_items: int, page_index: int, limit: int) -> "PageMeta":
        return cls(
            total_items=total_items,
            total_pages=math.ceil(total_items / limit) if limit else 0,
            page_index=page_index,
            limit=limit,
        )


class ErrorDetailResponse(BaseModel):
    field: str
    message: str


class ErrorResponse(CamelModel):
    """Error envelope (documented for OpenAPI; rendered by core.errors)."""

    status_code: int
    status: str
    message: str
    details: list[ErrorDetailResponse] | None = None


# =============================================================================
# Artists
# =============================================================================


class ArtistCreateRequest(CamelModel):
    artist_name: str = Field(max_length=50)
    unit_name: str | None = Field(default=None, max_length=25)
    content: str | None = Field(default=None, max_length=20)

    @field_validator("artist_name", mode="before")
    @classmethod
    def validate_artist_name(cls, v: Any) -> Any:
        return _require_text(v, "The artist name is required.")


class ArtistUpdateRequest(CamelModel):
    """Partial update: omitted or null fields are left unchanged."""

    artist_name: str | None = Field(default=None, max_length=50)
    unit_name: str | None = Field(default=None, max_length=25)
    content: str | None = Field(default=None, max_length=20)

    @field_validator("artist_name", mode="before")
    @classmethod
    def validate_artist_name(cls, v: Any) -> Any:
        return _reject_blank(v, "The artist name must not be blank.")


class ArtistResponse(CamelModel):
    id: int
    artist_name: str
    unit_name: str | None = None
    content: str | None = None
    audit_info: AuditInfo


class ArtistListResponse(CamelModel):
    items: list[ArtistResponse]
    meta: PageMeta


# =============================================================================
# Tracks (prsk music)
# =============================================================================


class TrackCreateRequest(CamelModel):
    title: str = Field(max_length=30)
    artist_id: int = Field(le=MAX_ID)
    music_type: MusicType
    specially: bool | None = None
    lyrics_name: str | None = Field(default=None, max_length=50)
    music_name: str | None = Field(default=None, max_length=50)
    featuring: str | None = Field(default=None, max_length=10)
    youtube_link: str = Field(max_length=100)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> Any:
        return _require_text(v, "The music title is required.")

    @field_validator("youtube_link", mode="before")
    @classmethod
    def validate_youtube_link(cls, v: Any) -> Any:
        return _require_text(v, "The YouTube link is required.")

    @field_validator("artist_id", mode="before")
    @classmethod
    def validate_artist_id(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("The artist id is required.")
        return v

    @field_validator("music_type", mode="before")
    @classmethod
    def validate_music_type(cls, v: Any) -> MusicType:
        if v is None:
            raise ValueError("The music type is required.")
        return _decode_music_type(v)


class TrackUpdateRequest(CamelModel):
    """Partial update: omitted or null fields are left unchanged."""

    title: str | None = Field(default=None, max_length=30)
    artist_id: int | None = Field(default=None, le=MAX_ID)
    music_type: MusicType | None = None
    specially: bool | None = None
    lyrics_name: str | None = Field(default=None, max_length=50)
    music_name: str | None = Field(default=None, max_length=50)
    featuring: str | None = Field(default=None, max_length=10)
    youtube_link: str | None = Field(default=None, max_length=100)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> Any:
        return _reject_blank(v, "The music title must not be blank.")

    @field_validator("youtube_link", mode="before")
    @classmethod
    def validate_youtube_link(cls, v: Any) -> Any:
        return _reject_blank(v, "The YouTube link must not be blank.")

    @field_validator("music_type", mode="before")
    @classmethod
    def validate_music_type(cls, v: Any) -> MusicType | None:
        if v is None:
            return None
        return _decode_music_type(v)


class TrackResponse(CamelModel):
    id: int
    title: str
    artist_id: int
    artist_name: str
    unit_name: str | None = None
    content: str | None = None
    music_type: MusicType
    specially: bool | None = None
    lyrics_name: str | None = None
    music_name: str | None = None
    featuring: str | None = None
    youtube_link: str
    audit_info: AuditInfo


class TrackListResponse(CamelModel):
    items: list[TrackResponse]
    meta: PageMeta


# =============================================================================
# Users
# =============================================================================


class UserCreateRequest(CamelModel):
    user_name: str = Field(max_length=20)
    password: str = Field(max_length=20)

    @field_validator("user_name", mode="before")
    @classmethod
    def validate_user_name(cls, v: Any) -> Any:
        return _require_text(v, "The user name is required.")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> Any:
        return _require_text(v, "The password is required.")


class UserUpdateRequest(CamelModel):
    """Partial update guarded by the current password.

    ``password`` must match the stored one; ``new_password`` replaces it.
    """

    user_name: str | None = Field(default=None, max_length=20)
    password: str = Field(max_length=20)
    new_password: str | None = Field(default=None, max_length=20)

    @field_validator("user_name", mode="before")
    @classmethod
    def validate_user_name(cls, v: Any) -> Any:
        return _reject_blank(v, "The user name must not be blank.")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> Any:
        return _require_text(v, "The password is required.")

    @field_validator("new_password", mode="before")
    @classmethod
    def validate_new_password(cls, v: Any) -> Any:
        return _reject_blank(v, "The new password must not be blank.")


class UserResponse(CamelModel):
    """User response; the password is never serialized."""

    id: int
    user_name: str
    audit_info: AuditInfo


class UserListResponse(CamelModel):
    items: list[UserResponse]
    meta: PageMeta


# =============================================================================
# Health
# =============================================================================


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    service: str


class PoolStatusResponse(CamelModel):
    """Connection pool status."""

    pool_size: int
    checked_out: int
    overflow: int
    checked_in: int


class DetailedHealthResponse(CamelModel):
    """Detailed health check response with component status."""

    status: str
    service: str
    database: bool
    pool: PoolStatusResponse | None = None

"""Track (prsk music) service.

A track must reference a live artist when it is written. Once written, the
artist may be soft-deleted; the track then renders with the placeholder
artist name instead of failing.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from core.errors import ConflictError, ErrorDetail, NotFoundError
from core.logger import get_logger
from core.telemetry import track_operation
from core.wide_event import set_wide_event_fields, set_wide_event_nested
from models import Artist, Track
from repositories.artist_repository import ArtistRepository
from repositories.track_repository import TrackRepository
from schemas import (
    AuditInfo,
    PageMeta,
    TrackCreateRequest,
    TrackListResponse,
    TrackResponse,
    TrackUpdateRequest,
)

logger = get_logger(__name__)

RESOURCE = "Prsk music"
UNKNOWN_ARTIST_NAME = "Unknown"

# Fields copied as-is when present on an update request
_PLAIN_UPDATE_FIELDS = (
    "specially",
    "lyrics_name",
    "music_name",
    "featuring",
    "youtube_link",
)


def _title_music_type_conflict() -> ConflictError:
    set_wide_event_nested("conflict", resource="track", field="Title and MusicType")
    return ConflictError(
        details=[
            ErrorDetail(
                "Title and MusicType", "Duplicate title and music type combination."
            )
        ]
    )


def _to_track_response(track: Track) -> TrackResponse:
    artist = track.artist
    if artist is None or artist.is_deleted:
        artist_name, unit_name, content = UNKNOWN_ARTIST_NAME, None, None
    else:
        artist_name, unit_name, content = (
            artist.artist_name,
            artist.unit_name,
            artist.content,
        )

    return TrackResponse(
        id=track.id,
        title=track.title,
        artist_id=track.artist_id,
        artist_name=artist_name,
        unit_name=unit_name,
        content=content,
        music_type=track.music_type,
        specially=track.specially,
        lyrics_name=track.lyrics_name,
        music_name=track.music_name,
        featuring=track.featuring,
        youtube_link=track.youtube_link,
        audit_info=AuditInfo.model_validate(track),
    )


async def _get_live_artist(db: AsyncSession, artist_id: int) -> Artist:
    artist = await ArtistRepository(db).get_by_id(artist_id)
    if artist is None:
        raise NotFoundError("Artist", artist_id)
    return artist


@track_operation("track_list")
async def list_tracks(db: AsyncSession, page_index: int, limit: int) -> TrackListResponse:
    repo = TrackRepository(db)
    page = await repo.list_page(offset=page_index * limit, limit=limit)
    return TrackListResponse(
        items=[_to_track_response(track) for track in page.items],
        meta=PageMeta.build(page.total, page_index, limit),
    )


@track_operation("track_create")
async def create_track(db: AsyncSession, request: TrackCreateRequest) -> TrackResponse:
    """Create a track.

    The (title, music_type) pair is checked before the artist reference.

    Raises:
        ConflictError: A live track already has this title and music type.
        NotFoundError: artist_id does not name a live artist.
    """
    repo = TrackRepository(db)

    existing = await repo.get_by_title_and_music_type(request.title, request.music_type)
    if existing is not None:
        logger.info(
            "track.conflict",
            title=request.title,
            music_type=int(request.music_type),
        )
        raise _title_music_type_conflict()

    artist = await _get_live_artist(db, request.artist_id)

    track = Track(
        title=request.title,
        artist_id=artist.id,
        artist=artist,
        music_type=request.music_type,
        specially=request.specially,
        lyrics_name=request.lyrics_name,
        music_name=request.music_name,
        featuring=request.featuring,
        youtube_link=request.youtube_link,
    )
    try:
        await repo.add(track, actor=get_settings().audit_actor)
    except IntegrityError:
        raise _title_music_type_conflict() from None

    logger.info("track.created", track_id=track.id, artist_id=artist.id)
    set_wide_event_fields(track_id=track.id, artist_id=artist.id)
    return _to_track_response(track)


@track_operation("track_update")
async def update_track(
    db: AsyncSession, track_id: int, request: TrackUpdateRequest
) -> TrackResponse:
    """Apply the non-null fields of ``request`` to a live track.

    Raises:
        NotFoundError: No live track has this ID, or artist_id does not name
            a live artist.
        ConflictError: The resulting (title, music_type) belongs to another
            live track.
    """
    repo = TrackRepository(db)
    track = await repo.get_by_id(track_id)
    if track is None:
        raise NotFoundError(RESOURCE, track_id)

    title_changed = request.title is not None and request.title != track.title
    music_type_changed = (
        request.music_type is not None and request.music_type != track.music_type
    )

    if title_changed or music_type_changed:
        new_title = request.title if request.title is not None else track.title
        new_music_type = (
            request.music_type if request.music_type is not None else track.music_type
        )
        existing = await repo.get_by_title_and_music_type(new_title, new_music_type)
        if existing is not None and existing.id != track.id:
            logger.info(
                "track.conflict",
                track_id=track_id,
                title=new_title,
                music_type=int(new_music_type),
            )
            raise _title_music_type_conflict()

    artist = None
    if request.artist_id is not None:
        artist = await _get_live_artist(db, request.artist_id)

    if request.title is not None:
        track.title = request.title
    if artist is not None:
        track.artist = artist
    if request.music_type is not None:
        track.music_type = request.music_type
    for field in _PLAIN_UPDATE_FIELDS:
        value = getattr(request, field)
        if value is not None:
            setattr(track, field, value)

    try:
        await repo.save(track, actor=get_settings().audit_actor)
    except IntegrityError:
        raise _title_music_type_conflict() from None

    logger.info("track.updated", track_id=track.id)
    set_wide_event_fields(track_id=track.id)
    return _to_track_response(track)


@track_operation("track_delete")
async def delete_track(db: AsyncSession, track_id: int) -> None:
    repo = TrackRepository(db)
    track = await repo.get_by_id(track_id)
    if track is None:
        raise NotFoundError(RESOURCE, track_id)

    await repo.soft_delete(track, actor=get_settings().audit_actor)

    logger.info("track.deleted", track_id=track_id)
    set_wide_event_fields(track_id=track_id)

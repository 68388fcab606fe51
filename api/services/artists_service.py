"""Artist service: listing, creation, partial update and soft delete."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from core.errors import ConflictError, ErrorDetail, NotFoundError
from core.logger import get_logger
from core.telemetry import track_operation
from core.wide_event import set_wide_event_fields, set_wide_event_nested
from models import Artist
from repositories.artist_repository import ArtistRepository
from schemas import (
    ArtistCreateRequest,
    ArtistListResponse,
    ArtistResponse,
    ArtistUpdateRequest,
    AuditInfo,
    PageMeta,
)

logger = get_logger(__name__)

RESOURCE = "Artist"


def _name_conflict(artist_name: str) -> ConflictError:
    set_wide_event_nested("conflict", resource="artist", field="artistName")
    return ConflictError(
        details=[
            ErrorDetail("artistName", f"Artist name already exist: {artist_name}")
        ]
    )


def _to_artist_response(artist: Artist) -> ArtistResponse:
    return ArtistResponse(
        id=artist.id,
        artist_name=artist.artist_name,
        unit_name=artist.unit_name,
        content=artist.content,
        audit_info=AuditInfo.model_validate(artist),
    )


async def _get_live_artist(repo: ArtistRepository, artist_id: int) -> Artist:
    artist = await repo.get_by_id(artist_id)
    if artist is None:
        raise NotFoundError(RESOURCE, artist_id)
    return artist


@track_operation("artist_list")
async def list_artists(
    db: AsyncSession, page_index: int, limit: int
) -> ArtistListResponse:
    """List live artists sorted by name. page_index is zero-based."""
    repo = ArtistRepository(db)
    page = await repo.list_page(offset=page_index * limit, limit=limit)
    return ArtistListResponse(
        items=[_to_artist_response(artist) for artist in page.items],
        meta=PageMeta.build(page.total, page_index, limit),
    )


@track_operation("artist_create")
async def create_artist(db: AsyncSession, request: ArtistCreateRequest) -> ArtistResponse:
    """Create an artist whose name is unique among live artists.

    Raises:
        ConflictError: A live artist already has this name.
    """
    repo = ArtistRepository(db)

    if await repo.get_by_artist_name(request.artist_name) is not None:
        logger.info("artist.conflict", artist_name=request.artist_name)
        raise _name_conflict(request.artist_name)

    artist = Artist(
        artist_name=request.artist_name,
        unit_name=request.unit_name,
        content=request.content,
    )
    try:
        await repo.add(artist, actor=get_settings().audit_actor)
    except IntegrityError:
        # Lost the race against a concurrent insert of the same name
        raise _name_conflict(request.artist_name) from None

    logger.info("artist.created", artist_id=artist.id)
    set_wide_event_fields(artist_id=artist.id)
    return _to_artist_response(artist)


@track_operation("artist_update")
async def update_artist(
    db: AsyncSession, artist_id: int, request: ArtistUpdateRequest
) -> ArtistResponse:
    """Apply the non-null fields of ``request`` to a live artist.

    Raises:
        NotFoundError: No live artist has this ID.
        ConflictError: The new name belongs to another live artist.
    """
    repo = ArtistRepository(db)
    artist = await _get_live_artist(repo, artist_id)

    new_name = request.artist_name
    if new_name is not None and new_name != artist.artist_name:
        existing = await repo.get_by_artist_name(new_name)
        if existing is not None and existing.id != artist.id:
            logger.info("artist.conflict", artist_id=artist_id, artist_name=new_name)
            raise _name_conflict(new_name)

    if new_name is not None:
        artist.artist_name = new_name
    if request.unit_name is not None:
        artist.unit_name = request.unit_name
    if request.content is not None:
        artist.content = request.content

    try:
        await repo.save(artist, actor=get_settings().audit_actor)
    except IntegrityError:
        raise _name_conflict(artist.artist_name) from None

    logger.info("artist.updated", artist_id=artist.id)
    set_wide_event_fields(artist_id=artist.id)
    return _to_artist_response(artist)


@track_operation("artist_delete")
async def delete_artist(db: AsyncSession, artist_id: int) -> None:
    """Soft-delete a live artist. Tracks referencing it keep the reference."""
    repo = ArtistRepository(db)
    artist = await _get_live_artist(repo, artist_id)
    await repo.soft_delete(artist, actor=get_settings().audit_actor)

    logger.info("artist.deleted", artist_id=artist_id)
    set_wide_event_fields(artist_id=artist_id)

"""Artist endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Request, Response
from starlette import status

from core.database import DbSession
from core.ratelimit import READ_LIMIT, WRITE_LIMIT, limiter
from models import MAX_ID
from routes.pagination import Pagination
from schemas import (
    ArtistCreateRequest,
    ArtistListResponse,
    ArtistResponse,
    ArtistUpdateRequest,
    ErrorResponse,
)
from services.artists_service import (
    create_artist,
    delete_artist,
    list_artists,
    update_artist,
)

router = APIRouter(prefix="/artists", tags=["artists"])

ArtistId = Annotated[int, Path(ge=1, le=MAX_ID)]


@router.get(
    "",
    response_model=ArtistListResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(READ_LIMIT)
async def list_artists_endpoint(
    request: Request, db: DbSession, pagination: Pagination
) -> ArtistListResponse:
    """List live artists ordered by artist name."""
    return await list_artists(db, pagination.page_index, pagination.limit)


@router.post(
    "",
    response_model=ArtistResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(WRITE_LIMIT)
async def create_artist_endpoint(
    request: Request, db: DbSession, body: ArtistCreateRequest
) -> ArtistResponse:
    return await create_artist(db, body)


@router.put(
    "/{id}",
    response_model=ArtistResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(WRITE_LIMIT)
async def update_artist_endpoint(
    request: Request, id: ArtistId, db: DbSession, body: ArtistUpdateRequest
) -> ArtistResponse:
    """Partially update an artist; null or omitted fields are left unchanged."""
    return await update_artist(db, id, body)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(WRITE_LIMIT)
async def delete_artist_endpoint(request: Request, id: ArtistId, db: DbSession) -> Response:
    await delete_artist(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Prsk music (track) endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Request, Response
from starlette import status

from core.database import DbSession
from core.ratelimit import READ_LIMIT, WRITE_LIMIT, limiter
from models import MAX_ID
from routes.pagination import Pagination
from schemas import (
    ErrorResponse,
    TrackCreateRequest,
    TrackListResponse,
    TrackResponse,
    TrackUpdateRequest,
)
from services.tracks_service import (
    create_track,
    delete_track,
    list_tracks,
    update_track,
)

router = APIRouter(prefix="/prsk-music", tags=["prsk-music"])

TrackId = Annotated[int, Path(ge=1, le=MAX_ID)]


@router.get(
    "",
    response_model=TrackListResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(READ_LIMIT)
async def list_tracks_endpoint(
    request: Request, db: DbSession, pagination: Pagination
) -> TrackListResponse:
    """List live tracks ordered by title, each with its artist's details."""
    return await list_tracks(db, pagination.page_index, pagination.limit)


@router.post(
    "",
    response_model=TrackResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Unknown artistId"},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(WRITE_LIMIT)
async def create_track_endpoint(
    request: Request, db: DbSession, body: TrackCreateRequest
) -> TrackResponse:
    return await create_track(db, body)


@router.put(
    "/{id}",
    response_model=TrackResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(WRITE_LIMIT)
async def update_track_endpoint(
    request: Request, id: TrackId, db: DbSession, body: TrackUpdateRequest
) -> TrackResponse:
    return await update_track(db, id, body)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(WRITE_LIMIT)
async def delete_track_endpoint(request: Request, id: TrackId, db: DbSession) -> Response:
    await delete_track(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

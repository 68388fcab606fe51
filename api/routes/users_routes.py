"""User endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Request, Response
from starlette import status

from core.database import DbSession
from core.ratelimit import READ_LIMIT, WRITE_LIMIT, limiter
from models import MAX_ID
from routes.pagination import Pagination
from schemas import (
    ErrorResponse,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from services.users_service import create_user, delete_user, list_users, update_user

router = APIRouter(prefix="/users", tags=["users"])

UserIdParam = Annotated[int, Path(ge=1, le=MAX_ID)]


@router.get(
    "",
    response_model=UserListResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(READ_LIMIT)
async def list_users_endpoint(
    request: Request, db: DbSession, pagination: Pagination
) -> UserListResponse:
    return await list_users(db, pagination.page_index, pagination.limit)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(WRITE_LIMIT)
async def create_user_endpoint(
    request: Request, db: DbSession, body: UserCreateRequest
) -> UserResponse:
    return await create_user(db, body)


@router.put(
    "/{id}",
    response_model=UserResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse, "description": "Wrong current password"},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(WRITE_LIMIT)
async def update_user_endpoint(
    request: Request, id: UserIdParam, db: DbSession, body: UserUpdateRequest
) -> UserResponse:
    """Update a user. ``password`` must be the user's current password."""
    return await update_user(db, id, body)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(WRITE_LIMIT)
async def delete_user_endpoint(
    request: Request, id: UserIdParam, db: DbSession
) -> Response:
    await delete_user(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

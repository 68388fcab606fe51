"""User service for user-related business logic."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from core.errors import ConflictError, ErrorDetail, NotFoundError, UnauthorizedError
from core.logger import get_logger
from core.telemetry import track_operation
from core.wide_event import set_wide_event_fields, set_wide_event_nested
from models import User
from repositories.user_repository import UserRepository
from schemas import (
    AuditInfo,
    PageMeta,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = get_logger(__name__)

RESOURCE = "User"


def _name_conflict(user_name: str) -> ConflictError:
    set_wide_event_nested("conflict", resource="user", field="userName")
    return ConflictError(
        details=[ErrorDetail("userName", f"User name already exist: {user_name}")]
    )


def _to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        user_name=user.user_name,
        audit_info=AuditInfo.model_validate(user),
    )


async def _get_live_user(repo: UserRepository, user_id: int) -> User:
    user = await repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(RESOURCE, user_id)
    return user


@track_operation("user_list")
async def list_users(db: AsyncSession, page_index: int, limit: int) -> UserListResponse:
    repo = UserRepository(db)
    page = await repo.list_page(offset=page_index * limit, limit=limit)
    return UserListResponse(
        items=[_to_user_response(user) for user in page.items],
        meta=PageMeta.build(page.total, page_index, limit),
    )


@track_operation("user_create")
async def create_user(db: AsyncSession, request: UserCreateRequest) -> UserResponse:
    repo = UserRepository(db)

    if await repo.get_by_user_name(request.user_name) is not None:
        logger.info("user.conflict", user_name=request.user_name)
        raise _name_conflict(request.user_name)

    user = User(user_name=request.user_name, password=request.password)
    try:
        await repo.add(user, actor=get_settings().audit_actor)
    except IntegrityError:
        raise _name_conflict(request.user_name) from None

    logger.info("user.created", user_id=user.id)
    set_wide_event_fields(user_id=user.id)
    return _to_user_response(user)


@track_operation("user_update")
async def update_user(
    db: AsyncSession, user_id: int, request: UserUpdateRequest
) -> UserResponse:
    """Update a user after checking the current password.

    The password comparison happens before anything else is evaluated, so a
    wrong password never reveals whether the new name is taken.

    Raises:
        NotFoundError: No live user has this ID.
        UnauthorizedError: ``request.password`` does not match.
        ConflictError: The new name belongs to another live user.
    """
    repo = UserRepository(db)
    user = await _get_live_user(repo, user_id)

    if user.password != request.password:
        logger.warning("user.password_mismatch", user_id=user_id)
        set_wide_event_fields(user_id=user_id, auth_failed=True)
        raise UnauthorizedError(details=[ErrorDetail("password", "Invalid password")])

    new_name = request.user_name
    if new_name is not None and new_name != user.user_name:
        existing = await repo.get_by_user_name(new_name)
        if existing is not None and existing.id != user.id:
            logger.info("user.conflict", user_id=user_id, user_name=new_name)
            raise _name_conflict(new_name)
        user.user_name = new_name

    if request.new_password is not None:
        user.password = request.new_password

    try:
        await repo.save(user, actor=get_settings().audit_actor)
    except IntegrityError:
        raise _name_conflict(user.user_name) from None

    logger.info("user.updated", user_id=user.id)
    set_wide_event_fields(user_id=user.id)
    return _to_user_response(user)


@track_operation("user_delete")
async def delete_user(db: AsyncSession, user_id: int) -> None:
    repo = UserRepository(db)
    user = await _get_live_user(repo, user_id)
    await repo.soft_delete(user, actor=get_settings().audit_actor)

    logger.info("user.deleted", user_id=user_id)
    set_wide_event_fields(user_id=user_id)

"""Shared ?page=&limit= dependency for list endpoints."""

from typing import Annotated, NamedTuple

from fastapi import Depends, Query

from core.config import MAX_PAGE_LIMIT, get_settings
from models import MAX_ID


class PageParams(NamedTuple):
    """Zero-based page index and page size."""

    page_index: int
    limit: int


def get_page_params(
    page: Annotated[
        int, Query(ge=1, le=MAX_ID, description="1-based page number")
    ] = 1,
    limit: Annotated[
        int | None, Query(ge=1, le=MAX_PAGE_LIMIT, description="Items per page")
    ] = None,
) -> PageParams:
    if limit is None:
        limit = get_settings().default_page_limit
    return PageParams(page_index=page - 1, limit=limit)


Pagination = Annotated[PageParams, Depends(get_page_params)]

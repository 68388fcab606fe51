"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services free of
SQL. Every read filters out soft-deleted rows; writes stamp audit fields
and flush so constraint violations surface inside the request.
"""

from repositories.artist_repository import ArtistRepository
from repositories.track_repository import TrackRepository
from repositories.user_repository import UserRepository
from repositories.utils import Page, log_slow_query

__all__ = [
    "ArtistRepository",
    "Page",
    "TrackRepository",
    "UserRepository",
    "log_slow_query",
]

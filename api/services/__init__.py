"""Service layer for business logic.

Services encapsulate the business rules, keeping routes thin and focused
on HTTP handling.

Layer hierarchy:
    Routes (HTTP) -> Services (Business Logic) -> Repositories (Database)

Services should:
- Enforce uniqueness among live rows before writing
- Orchestrate calls to repositories
- Raise core.errors exceptions; main.py turns them into responses

Services should NOT:
- Directly execute SQL queries (use repositories)
- Know about HTTP request/response details
"""

from services.artists_service import (
    create_artist,
    delete_artist,
    list_artists,
    update_artist,
)
from services.tracks_service import (
    create_track,
    delete_track,
    list_tracks,
    update_track,
)
from services.users_service import (
    create_user,
    delete_user,
    list_users,
    update_user,
)

__all__ = [
    "create_artist",
    "create_track",
    "create_user",
    "delete_artist",
    "delete_track",
    "delete_user",
    "list_artists",
    "list_tracks",
    "list_users",
    "update_artist",
    "update_track",
    "update_user",
]

"""Unit tests for services/tracks_service.py."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from core.errors import ConflictError, NotFoundError
from models import Artist, MusicType, Track
from schemas import TrackCreateRequest, TrackUpdateRequest
from services.tracks_service import (
    UNKNOWN_ARTIST_NAME,
    _to_track_response,
    create_track,
    update_track,
)


def _artist(artist_id: int = 1, deleted: bool = False) -> Artist:
    artist = Artist(id=artist_id, artist_name=f"Artist {artist_id}", unit_name="u")
    artist.mark_created()
    artist.is_deleted = deleted
    return artist


def _track(track_id: int = 1, artist: Artist | None = None, **kwargs) -> Track:
    artist = artist or _artist()
    track = Track(
        id=track_id,
        title=kwargs.get("title", "T"),
        artist_id=artist.id,
        artist=artist,
        music_type=kwargs.get("music_type", MusicType.ORIGINAL),
        youtube_link=kwargs.get("youtube_link", "u"),
    )
    track.mark_created()
    return track


def _insert(entity, actor):
    """Stand-in for repo.add: stamps audit fields and assigns a primary key."""
    entity.mark_created(actor)
    entity.id = entity.id or 101
    return entity


@pytest.fixture
def track_repo():
    with patch("services.tracks_service.TrackRepository") as repo_class:
        instance = MagicMock()
        instance.get_by_id = AsyncMock(return_value=None)
        instance.get_by_title_and_music_type = AsyncMock(return_value=None)
        instance.add = AsyncMock(side_effect=_insert)
        instance.save = AsyncMock(side_effect=lambda track, actor: track)
        repo_class.return_value = instance
        yield instance


@pytest.fixture
def artist_repo():
    with patch("services.tracks_service.ArtistRepository") as repo_class:
        instance = MagicMock()
        instance.get_by_id = AsyncMock(return_value=_artist())
        repo_class.return_value = instance
        yield instance


@pytest.mark.unit
class TestToTrackResponse:
    def test_live_artist_fields(self):
        response = _to_track_response(_track())

        assert response.artist_name == "Artist 1"
        assert response.unit_name == "u"

    def test_deleted_artist_falls_back(self):
        response = _to_track_response(_track(artist=_artist(deleted=True)))

        assert response.artist_name == UNKNOWN_ARTIST_NAME
        assert response.unit_name is None
        assert response.content is None
        assert response.artist_id == 1


@pytest.mark.unit
class TestCreateTrack:
    def _request(self, **overrides) -> TrackCreateRequest:
        data = {"title": "T", "artistId": 1, "musicType": 0, "youtubeLink": "u"}
        data.update(overrides)
        return TrackCreateRequest.model_validate(data)

    async def test_conflict_checked_before_artist(self, track_repo, artist_repo):
        track_repo.get_by_title_and_music_type.return_value = _track()

        with pytest.raises(ConflictError) as exc_info:
            await create_track(MagicMock(), self._request(artistId=99))

        assert exc_info.value.details[0].field == "Title and MusicType"
        artist_repo.get_by_id.assert_not_awaited()

    async def test_missing_artist(self, track_repo, artist_repo):
        artist_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await create_track(MagicMock(), self._request(artistId=99))

        assert exc_info.value.message == "Artist not found for id: 99"
        track_repo.add.assert_not_awaited()

    async def test_creates(self, track_repo, artist_repo):
        response = await create_track(MagicMock(), self._request(musicType=2))

        assert response.music_type is MusicType.TWO_D_MV
        assert response.artist_name == "Artist 1"
        track_repo.add.assert_awaited_once()

    async def test_integrity_error_on_add_becomes_conflict(
        self, track_repo, artist_repo
    ):
        track_repo.add.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        with pytest.raises(ConflictError) as exc_info:
            await create_track(MagicMock(), self._request())

        assert exc_info.value.details[0].field == "Title and MusicType"


@pytest.mark.unit
class TestUpdateTrack:
    async def test_not_found_message(self, track_repo, artist_repo):
        with pytest.raises(NotFoundError) as exc_info:
            await update_track(MagicMock(), 8, TrackUpdateRequest(title="X"))

        assert exc_info.value.message == "Prsk music not found for id: 8"

    async def test_music_type_only_checks_combined_key(self, track_repo, artist_repo):
        track_repo.get_by_id.return_value = _track(title="T")

        await update_track(
            MagicMock(), 1, TrackUpdateRequest(music_type=MusicType.THREE_D_MV)
        )

        track_repo.get_by_title_and_music_type.assert_awaited_once_with(
            "T", MusicType.THREE_D_MV
        )

    async def test_unchanged_key_skips_lookup(self, track_repo, artist_repo):
        track_repo.get_by_id.return_value = _track(title="T")

        await update_track(
            MagicMock(),
            1,
            TrackUpdateRequest(title="T", music_type=MusicType.ORIGINAL, featuring="f"),
        )

        track_repo.get_by_title_and_music_type.assert_not_awaited()

    async def test_same_row_match_is_not_a_conflict(self, track_repo, artist_repo):
        track = _track(title="T")
        track_repo.get_by_id.return_value = track
        track_repo.get_by_title_and_music_type.return_value = track

        response = await update_track(MagicMock(), 1, TrackUpdateRequest(title="T2"))

        assert response.title == "T2"

    async def test_keeps_unset_fields(self, track_repo, artist_repo):
        track_repo.get_by_id.return_value = _track(
            music_type=MusicType.TWO_D_MV, youtube_link="https://youtu.be/a"
        )

        response = await update_track(MagicMock(), 1, TrackUpdateRequest(title="X"))

        assert response.title == "X"
        assert response.music_type is MusicType.TWO_D_MV
        assert response.youtube_link == "https://youtu.be/a"
        artist_repo.get_by_id.assert_not_awaited()

    async def test_switches_artist(self, track_repo, artist_repo):
        track_repo.get_by_id.return_value = _track()
        artist_repo.get_by_id.return_value = _artist(5)

        response = await update_track(MagicMock(), 1, TrackUpdateRequest(artist_id=5))

        assert response.artist_name == "Artist 5"

    async def test_integrity_error_on_save_becomes_conflict(
        self, track_repo, artist_repo
    ):
        track_repo.get_by_id.return_value = _track(title="T")
        track_repo.save.side_effect = IntegrityError("UPDATE", {}, Exception("unique"))

        with pytest.raises(ConflictError) as exc_info:
            await update_track(MagicMock(), 1, TrackUpdateRequest(title="T2"))

        assert exc_info.value.details[0].message == (
            "Duplicate title and music type combination."
        )

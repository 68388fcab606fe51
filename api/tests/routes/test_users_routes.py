"""Integration tests for /users routes."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from repositories.user_repository import UserRepository
from tests.factories import UserFactory, create_async

pytestmark = pytest.mark.integration


class TestCreateUser:
    async def test_password_is_never_returned(self, client: AsyncClient):
        response = await client.post(
            "/users", json={"userName": "ichika", "password": "pw"}
        )

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"id", "userName", "auditInfo"}
        assert data["userName"] == "ichika"

    async def test_duplicate_returns_409(self, client: AsyncClient):
        await client.post("/users", json={"userName": "ichika", "password": "pw"})

        response = await client.post(
            "/users", json={"userName": "ichika", "password": "other"}
        )

        assert response.status_code == 409
        assert response.json()["details"] == [
            {"field": "userName", "message": "User name already exist: ichika"}
        ]

    async def test_unique_index_race_returns_409_and_rolls_back(
        self, client: AsyncClient
    ):
        await client.post("/users", json={"userName": "ichika", "password": "pw"})

        # Simulate a concurrent insert slipping past the lookup
        with patch.object(
            UserRepository, "get_by_user_name", AsyncMock(return_value=None)
        ):
            raced = await client.post(
                "/users", json={"userName": "ichika", "password": "pw"}
            )
            after = await client.post(
                "/users", json={"userName": "saki", "password": "pw"}
            )

        assert raced.status_code == 409
        assert raced.json()["details"] == [
            {"field": "userName", "message": "User name already exist: ichika"}
        ]
        assert after.status_code == 201
        assert (await client.get("/users")).json()["meta"]["totalItems"] == 2

    async def test_missing_password_returns_400(self, client: AsyncClient):
        response = await client.post("/users", json={"userName": "ichika"})

        assert response.status_code == 400
        assert response.json()["details"] == [
            {"field": "password", "message": "The password is required."}
        ]


class TestListUsers:
    async def test_sorted_by_user_name(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        for name in ("saki", "honami", "shiho"):
            await create_async(UserFactory, db_session, user_name=name)
        await db_session.commit()

        response = await client.get("/users", params={"limit": 2})

        data = response.json()
        assert [item["userName"] for item in data["items"]] == ["honami", "saki"]
        assert data["meta"] == {
            "totalItems": 3,
            "totalPages": 2,
            "pageIndex": 0,
            "limit": 2,
        }


class TestUpdateUser:
    async def test_rename_and_change_password(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        user = await create_async(
            UserFactory, db_session, user_name="ichika", password="old"
        )
        await db_session.commit()

        response = await client.put(
            f"/users/{user.id}",
            json={"userName": "ichika2", "password": "old", "newPassword": "new"},
        )

        assert response.status_code == 200
        assert response.json()["userName"] == "ichika2"

        stored = await db_session.execute(
            select(User.password).where(User.id == user.id)
        )
        assert stored.scalar_one() == "new"

    async def test_wrong_password_returns_401_and_persists_nothing(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        user = await create_async(
            UserFactory, db_session, user_name="ichika", password="right"
        )
        await db_session.commit()

        response = await client.put(
            f"/users/{user.id}", json={"userName": "hacked", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "statusCode": 401,
            "status": "UNAUTHORIZED",
            "message": "Authentication failed",
            "details": [{"field": "password", "message": "Invalid password"}],
        }

        stored = await db_session.execute(
            select(User.user_name).where(User.id == user.id)
        )
        assert stored.scalar_one() == "ichika"

    async def test_wrong_password_wins_over_conflict(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await create_async(UserFactory, db_session, user_name="taken")
        user = await create_async(UserFactory, db_session, password="right")
        await db_session.commit()

        response = await client.put(
            f"/users/{user.id}", json={"userName": "taken", "password": "wrong"}
        )

        assert response.status_code == 401

    async def test_rename_to_taken_name_returns_409(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await create_async(UserFactory, db_session, user_name="taken")
        user = await create_async(UserFactory, db_session, password="right")
        await db_session.commit()

        response = await client.put(
            f"/users/{user.id}", json={"userName": "taken", "password": "right"}
        )

        assert response.status_code == 409

    async def test_missing_password_returns_400(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        user = await create_async(UserFactory, db_session)
        await db_session.commit()

        response = await client.put(f"/users/{user.id}", json={"userName": "x"})

        assert response.status_code == 400

    async def test_unknown_user_returns_404(self, client: AsyncClient):
        response = await client.put("/users/7", json={"password": "pw"})

        assert response.status_code == 404
        assert response.json()["message"] == "User not found for id: 7"


class TestDeleteUser:
    async def test_delete_then_name_reusable(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        user = await create_async(UserFactory, db_session, user_name="ichika")
        await db_session.commit()

        deleted = await client.delete(f"/users/{user.id}")
        again = await client.delete(f"/users/{user.id}")
        recreated = await client.post(
            "/users", json={"userName": "ichika", "password": "pw"}
        )

        assert deleted.status_code == 204
        assert again.status_code == 404
        assert recreated.status_code == 201

    async def test_id_beyond_int4_returns_400(self, client: AsyncClient):
        response = await client.delete("/users/99999999999999999999")

        assert response.status_code == 400
        assert response.json()["details"] == [
            {"field": "id", "message": "ID must not exceed 2147483647."}
        ]

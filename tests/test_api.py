"""API tests: routing, status codes and error bodies."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from chatvault.api.deps import get_directory
from chatvault.core.config import get_settings
from chatvault.core.database import get_session_maker
from chatvault.core.encryption import get_message_cipher
from chatvault.core.errors import InternalError
from chatvault.main import create_app
from chatvault.models.base import ID_LENGTH

PREFIX = "/v1"


def missing_id(suffix: str) -> str:
    return ("z" + suffix).ljust(ID_LENGTH, "0")


@pytest.fixture
def app(session_maker, cipher):
    app = create_app()
    app.dependency_overrides[get_session_maker] = lambda: session_maker
    app.dependency_overrides[get_message_cipher] = lambda: cipher
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def create_user(client: AsyncClient, username: str) -> str:
    response = await client.post(f"{PREFIX}/users/add", json={"username": username})
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestRoutes:
    def test_all_routes_registered(self):
        paths = set(create_app().openapi()["paths"])

        for expected in [
            "/v1/users/add",
            "/v1/chat/add",
            "/v1/chat/get",
            "/v1/messages/add",
            "/v1/messages/get",
            "/v1/health",
            "/v1/health/ready",
        ]:
            assert expected in paths, f"Missing route: {expected}"

    @pytest.mark.asyncio
    async def test_health(self, client):
        assert (await client.get(f"{PREFIX}/health")).json() == {"status": "ok"}
        assert (await client.get(f"{PREFIX}/health/ready")).json() == {"status": "ready"}


class TestUsers:
    @pytest.mark.asyncio
    async def test_create_user(self, client):
        user_id = await create_user(client, "  Anna   Maria  ")

        assert len(user_id) == ID_LENGTH

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, client):
        await create_user(client, "alice")

        response = await client.post(f"{PREFIX}/users/add", json={"username": "alice"})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "conflict"
        assert body["status_code"] == 409
        assert body["request_url"] == "/v1/users/add"
        assert body["timestamp"]

    @pytest.mark.asyncio
    async def test_invalid_username_is_bad_request(self, client):
        response = await client.post(f"{PREFIX}/users/add", json={"username": "a$"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert body["details"][0]["field"] == "username"


class TestChatsAndMessages:
    @pytest.mark.asyncio
    async def test_full_flow(self, client):
        u1 = await create_user(client, "user1")
        u2 = await create_user(client, "user2")
        u3 = await create_user(client, "user3")

        response = await client.post(f"{PREFIX}/chat/add", json={"name": "room1", "users": [u1, u2]})
        assert response.status_code == 200
        chat_id = response.json()["id"]

        response = await client.post(
            f"{PREFIX}/messages/add", json={"chat": chat_id, "author": u1, "text": "hi"}
        )
        assert response.status_code == 201

        response = await client.post(
            f"{PREFIX}/messages/add", json={"chat": chat_id, "author": u3, "text": "hi"}
        )
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

        response = await client.post(f"{PREFIX}/messages/get", json={"chat": chat_id})
        assert response.status_code == 200
        messages = response.json()
        assert len(messages) == 1
        assert messages[0]["text"] == "hi"
        assert messages[0]["author"] == u1
        assert messages[0]["chat"] == chat_id

        response = await client.post(f"{PREFIX}/chat/get", json={"user": u1})
        assert response.status_code == 200
        chats = response.json()
        assert [c["name"] for c in chats] == ["room1"]
        assert {u["username"] for u in chats[0]["users"]} == {"user1", "user2"}

    @pytest.mark.asyncio
    async def test_create_chat_reports_all_missing_members(self, client):
        u1 = await create_user(client, "user1")
        b, c = missing_id("b"), missing_id("c")

        response = await client.post(f"{PREFIX}/chat/add", json={"name": "room1", "users": [u1, b, c]})

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "not_found"
        assert body["details"] == {"entity": "user", "missing_ids": [b, c]}

    @pytest.mark.asyncio
    async def test_duplicate_chat_name_conflicts(self, client):
        u1 = await create_user(client, "user1")
        await client.post(f"{PREFIX}/chat/add", json={"name": "room1", "users": [u1]})

        response = await client.post(f"{PREFIX}/chat/add", json={"name": "room1", "users": [u1]})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_duplicate_member_ids_are_rejected(self, client):
        u1 = await create_user(client, "user1")

        response = await client.post(f"{PREFIX}/chat/add", json={"name": "room1", "users": [u1, u1]})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_messages_of_unknown_chat(self, client):
        response = await client.post(f"{PREFIX}/messages/get", json={"chat": missing_id("1")})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_chats_of_unknown_user(self, client):
        response = await client.post(f"{PREFIX}/chat/get", json={"user": missing_id("1")})

        assert response.status_code == 404


class TestUnhandledErrors:
    @pytest.mark.asyncio
    async def test_unexpected_exception_is_generic_500(self, app):
        class BrokenDirectory:
            async def create_user(self, username: str):
                raise RuntimeError("secret connection string leaked")

        app.dependency_overrides[get_directory] = lambda: BrokenDirectory()
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(f"{PREFIX}/users/add", json={"username": "alice"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "internal"
        assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_internal_service_error_uses_configured_message(self, app, monkeypatch):
        monkeypatch.setattr(get_settings(), "error_default_message", "Something went wrong")

        class FailingDirectory:
            async def create_user(self, username: str):
                raise InternalError("pool exhausted on db-primary")

        app.dependency_overrides[get_directory] = lambda: FailingDirectory()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(f"{PREFIX}/users/add", json={"username": "alice"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "internal"
        assert body["message"] == "Something went wrong"
        assert "db-primary" not in response.text

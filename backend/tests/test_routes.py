"""
WeatherNotes — HTTP Route Tests
================================

What:  End-to-end flows through the ASGI app: forms in, 303 redirects out.
How:   Each client keeps its own signed session cookie, like a browser.
       The weather adapter is patched so no test reaches the network.

What we test:
    ✅ register → create → list → delete
    ✅ Duplicate registration and failed login leave no session
    ✅ Anonymous access to /app redirects to /login
    ✅ Another user's note can't be edited, updated or deleted
    ✅ Weather widget vs fallback message, with the notes still listed
    ✅ Failed writes answer 500 without a redirect
    ✅ The unexpected-error page carries the request id
"""

import pytest
from unittest.mock import AsyncMock, patch
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.database import async_session_factory
from weathernotes.exceptions import WeatherNotFoundError
from weathernotes.main import create_app
from weathernotes.models.note import Note
from weathernotes.models.user import User
from weathernotes.schemas.weather import WEATHER_FALLBACK_MESSAGE, WeatherSnapshot
from weathernotes.services.weather_service import weather_service

PARIS = WeatherSnapshot(location="Paris", country="France", temp_c=7.0, condition="Partly cloudy")


@pytest.fixture(autouse=True)
def no_weather():
    """Default: the weather lookup finds nothing."""
    with patch.object(
        weather_service, "fetch_current", AsyncMock(side_effect=WeatherNotFoundError("Paris"))
    ) as fetch:
        yield fetch


async def _notes():
    async with async_session_factory() as session:
        result = await session.execute(select(Note).order_by(Note.id))
        return list(result.scalars().all())


async def _user_count() -> int:
    async with async_session_factory() as session:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()


async def _register(client, email="a@x.com", password="pw", city="Paris"):
    return await client.post(
        "/register", data={"username": email, "password": password, "city": city}
    )


def _redirects_to(response, location: str) -> bool:
    return response.status_code == 303 and response.headers["location"] == location


class TestAccountRoutes:

    @pytest.mark.asyncio
    async def test_home(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert "/register" in response.text

    @pytest.mark.asyncio
    async def test_register_logs_in(self, test_client):
        response = await _register(test_client)
        assert _redirects_to(response, "/app")

        page = await test_client.get("/app")
        assert page.status_code == 200
        assert "a@x.com" in page.text

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, test_client, other_client):
        await _register(test_client)

        response = await _register(other_client, password="different")

        assert _redirects_to(response, "/login")
        assert await _user_count() == 1
        assert _redirects_to(await other_client.get("/app"), "/login")

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, other_client):
        await _register(test_client)

        response = await other_client.post("/login", data={"username": "a@x.com", "password": "pw"})

        assert _redirects_to(response, "/app")
        assert (await other_client.get("/app")).status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, other_client):
        await _register(test_client)

        response = await other_client.post("/login", data={"username": "a@x.com", "password": "nope"})

        assert _redirects_to(response, "/login")
        assert _redirects_to(await other_client.get("/app"), "/login")

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client):
        response = await test_client.post("/login", data={"username": "ghost@x.com", "password": "pw"})
        assert _redirects_to(response, "/login")

    @pytest.mark.asyncio
    async def test_login_form_when_authenticated(self, test_client):
        await _register(test_client)

        assert _redirects_to(await test_client.get("/login"), "/app")
        assert _redirects_to(await test_client.get("/register"), "/app")

    @pytest.mark.asyncio
    async def test_login_form_when_anonymous(self, test_client):
        response = await test_client.get("/login")
        assert response.status_code == 200
        assert 'name="username"' in response.text

    @pytest.mark.asyncio
    async def test_logout(self, test_client):
        await _register(test_client)

        assert _redirects_to(await test_client.get("/logout"), "/")
        assert _redirects_to(await test_client.get("/app"), "/login")


class TestNoteRoutes:

    @pytest.mark.asyncio
    async def test_anonymous_is_sent_to_login(self, test_client):
        assert _redirects_to(await test_client.get("/app"), "/login")
        assert _redirects_to(
            await test_client.post("/submit", data={"title": "x", "content": "y"}), "/login"
        )
        assert await _notes() == []

    @pytest.mark.asyncio
    async def test_create_list_delete(self, test_client):
        await _register(test_client)

        response = await test_client.post("/submit", data={"title": "", "content": "hi"})
        assert _redirects_to(response, "/app")

        notes = await _notes()
        assert [(n.title, n.content) for n in notes] == [("Untitled", "hi")]

        page = await test_client.get("/app")
        assert "Untitled" in page.text
        assert "hi" in page.text

        response = await test_client.post("/app-delete", data={"id": str(notes[0].id)})
        assert _redirects_to(response, "/app")
        assert await _notes() == []

    @pytest.mark.asyncio
    async def test_edit_and_update(self, test_client):
        await _register(test_client)
        await test_client.post("/submit", data={"title": "Old", "content": "body"})
        note = (await _notes())[0]

        page = await test_client.post("/app-edit", data={"id": str(note.id)})
        assert page.status_code == 200
        assert 'action="/app-update"' in page.text
        assert 'value="Old"' in page.text

        response = await test_client.post(
            "/app-update", data={"id": str(note.id), "title": "", "content": "new body"}
        )
        assert _redirects_to(response, "/app")

        stored = (await _notes())[0]
        assert (stored.title, stored.content) == ("Old", "new body")

    @pytest.mark.asyncio
    async def test_other_users_note_is_untouchable(self, test_client, other_client):
        await _register(test_client, "alice@x.com")
        await test_client.post("/submit", data={"title": "Alice", "content": "secret"})
        note = (await _notes())[0]
        await _register(other_client, "bob@x.com")

        edit = await other_client.post("/app-edit", data={"id": str(note.id)})
        update = await other_client.post(
            "/app-update", data={"id": str(note.id), "title": "Bob", "content": "mine now"}
        )
        delete = await other_client.post("/app-delete", data={"id": str(note.id)})

        assert _redirects_to(edit, "/app")
        assert _redirects_to(update, "/app")
        assert _redirects_to(delete, "/app")
        stored = await _notes()
        assert [(n.title, n.content) for n in stored] == [("Alice", "secret")]

        bobs_page = await other_client.get("/app")
        assert "secret" not in bobs_page.text

    @pytest.mark.asyncio
    async def test_non_integer_id_is_rejected(self, test_client):
        await _register(test_client)

        response = await test_client.post("/app-delete", data={"id": "abc"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_weather_widget(self, test_client, no_weather):
        no_weather.side_effect = None
        no_weather.return_value = PARIS
        await _register(test_client)

        page = await test_client.get("/app")

        assert "Partly cloudy" in page.text
        assert WEATHER_FALLBACK_MESSAGE not in page.text
        no_weather.assert_awaited_with("Paris")

    @pytest.mark.asyncio
    async def test_weather_fallback(self, test_client):
        await _register(test_client)

        page = await test_client.get("/app")

        assert page.status_code == 200
        assert WEATHER_FALLBACK_MESSAGE in page.text

    @pytest.mark.asyncio
    async def test_weather_fallback_keeps_notes(self, test_client):
        await _register(test_client)
        await test_client.post("/submit", data={"title": "T1", "content": "hello"})

        page = await test_client.get("/app")

        assert page.status_code == 200
        assert "T1" in page.text
        assert "hello" in page.text
        assert WEATHER_FALLBACK_MESSAGE in page.text


class TestWriteFailures:
    """A failed write renders the error page and never redirects to /app."""

    @pytest.mark.asyncio
    async def test_submit_failure(self, test_client):
        await _register(test_client)

        with patch.object(
            AsyncSession, "flush",
            AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full"))),
        ):
            response = await test_client.post("/submit", data={"title": "T", "content": "c"})

        assert response.status_code == 500
        assert "location" not in response.headers
        assert await _notes() == []

    @pytest.mark.asyncio
    async def test_update_and_delete_failure(self, test_client):
        await _register(test_client)
        await test_client.post("/submit", data={"title": "Keep", "content": "body"})
        note = (await _notes())[0]

        with patch.object(
            AsyncSession, "execute",
            AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("locked"))),
        ):
            update = await test_client.post(
                "/app-update", data={"id": str(note.id), "title": "New", "content": "new"}
            )
            delete = await test_client.post("/app-delete", data={"id": str(note.id)})

        for response in (update, delete):
            assert response.status_code == 500
            assert "location" not in response.headers
        stored = await _notes()
        assert [(n.title, n.content) for n in stored] == [("Keep", "body")]


class TestErrorPages:

    @pytest.mark.asyncio
    async def test_unexpected_error_page_shows_request_id(self):
        app = create_app()

        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret-internal-detail")

        # ServerErrorMiddleware re-raises after sending the page
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/boom", headers={"X-Request-ID": "ref-4242"})

        assert response.status_code == 500
        assert "ref-4242" in response.text
        assert "secret-internal-detail" not in response.text


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["weather"] == "configured"
        assert body["status"] == "healthy"

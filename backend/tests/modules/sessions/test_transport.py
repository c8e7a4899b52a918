"""Tests for session cookie and header transport."""

from unittest.mock import MagicMock

from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from modules.sessions.transport import (
    SESSION_HEADER,
    clear_session_cookie,
    read_session_token,
    set_session_cookie,
)


def settings(cross_site: bool = False):
    mock = MagicMock()
    mock.session_cookie_name = "session_token"
    mock.session_cookie_max_age = 86400
    mock.session_cookie_cross_site = cross_site
    return mock


def build_app(cross_site: bool = False) -> FastAPI:
    app = FastAPI()

    @app.get("/read")
    async def read(request: Request):
        return {"token": read_session_token(request, settings(cross_site))}

    @app.post("/set")
    async def set_cookie(response: Response):
        set_session_cookie(response, "tok-123", settings(cross_site))
        return {}

    @app.post("/clear")
    async def clear(response: Response):
        clear_session_cookie(response, settings(cross_site))
        return {}

    return app


class TestReadSessionToken:
    def test_reads_cookie(self):
        client = TestClient(build_app())
        client.cookies.set("session_token", "from-cookie")
        assert client.get("/read").json() == {"token": "from-cookie"}

    def test_reads_header(self):
        client = TestClient(build_app())
        response = client.get("/read", headers={SESSION_HEADER: "from-header"})
        assert response.json() == {"token": "from-header"}

    def test_cookie_wins_over_header(self):
        client = TestClient(build_app())
        client.cookies.set("session_token", "from-cookie")
        response = client.get("/read", headers={SESSION_HEADER: "from-header"})
        assert response.json() == {"token": "from-cookie"}

    def test_absent(self):
        client = TestClient(build_app())
        assert client.get("/read").json() == {"token": None}


class TestSessionCookie:
    def test_set_cookie_attributes(self):
        response = TestClient(build_app()).post("/set")
        cookie = response.headers["set-cookie"]

        assert "session_token=tok-123" in cookie
        assert "Max-Age=86400" in cookie
        assert "Path=/" in cookie
        assert "HttpOnly" in cookie
        assert "SameSite=lax" in cookie
        assert "Secure" not in cookie

    def test_cross_site_cookie_is_secure(self):
        cookie = TestClient(build_app(cross_site=True)).post("/set").headers["set-cookie"]

        assert "SameSite=none" in cookie
        assert "Secure" in cookie

    def test_clear_cookie_expires_it(self):
        cookie = TestClient(build_app()).post("/clear").headers["set-cookie"]

        assert "session_token=" in cookie
        assert "Max-Age=0" in cookie

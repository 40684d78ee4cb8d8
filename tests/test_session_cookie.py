"""
Tests for the session cookie helpers
"""

from fastapi import Response
from starlette.requests import Request

from upskillnow.core.config import settings
from upskillnow.core.session import clear_session_cookie, read_session_cookie, set_session_cookie


def _request_with_cookie(header: str) -> Request:
    return Request({"type": "http", "headers": [(b"cookie", header.encode())]})


def test_set_session_cookie_attributes():
    response = Response()
    set_session_cookie(response, "abc.def.ghi")

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("token=abc.def.ghi")
    assert "Max-Age=86400" in cookie
    assert "HttpOnly" in cookie
    assert "Path=/" in cookie
    assert "samesite=strict" in cookie.lower()
    assert "Secure" not in cookie


def test_cookie_is_secure_in_production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    response = Response()
    set_session_cookie(response, "abc")

    assert "Secure" in response.headers["set-cookie"]


def test_clear_session_cookie_expires_immediately():
    response = Response()
    clear_session_cookie(response)

    cookie = response.headers["set-cookie"]
    assert cookie.startswith('token=""') or cookie.startswith("token=;")
    assert "Max-Age=0" in cookie


def test_read_session_cookie():
    assert read_session_cookie(_request_with_cookie("token=xyz; other=1")) == "xyz"


def test_empty_or_missing_cookie_reads_as_none():
    assert read_session_cookie(_request_with_cookie("token=")) is None
    assert read_session_cookie(_request_with_cookie("other=1")) is None

"""Shared test fixtures."""

import json
from unittest.mock import MagicMock

import pytest
import requests

import token_store

REST_URL = "https://rest91.bullhornstaffing.com/rest-services/1abc/"


class MemoryStore:
    """In-memory stand-in for TokenStore."""

    def __init__(self, tokens=None):
        self.tokens = dict(tokens or {})
        self.writes = 0

    def get(self, key, default=None):
        return self.tokens.get(key, default)

    def set(self, key, value):
        self.update({key: value})

    def update(self, values):
        for key, value in values.items():
            if value is None:
                self.tokens.pop(key, None)
            else:
                self.tokens[key] = value
        self.writes += 1

    def clear(self):
        self.tokens = {}
        self.writes += 1

    def is_logged_in(self):
        return bool(self.get(token_store.BH_REST_TOKEN) and self.get(token_store.REST_URL))


def _make_response(status_code=200, body=None, headers=None):
    res = requests.Response()
    res.status_code = status_code
    res.encoding = "utf-8"
    res._content = json.dumps(body).encode() if body is not None else b""
    res.headers.update(headers or {})
    return res


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.config/bh-cli."""
    monkeypatch.setenv("BH_CLI_CONFIG_DIR", str(tmp_path / "bh-cli"))
    for name in ("BH_USER_NAME", "BH_USER_PASSWORD", "BH_API_CLIENT_ID", "BH_API_CLIENT_SECRET"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "bh-cli"


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def logged_in_store():
    return MemoryStore({
        token_store.BH_REST_TOKEN: "old-rest-token",
        token_store.REST_URL: REST_URL,
        token_store.REFRESH_TOKEN: "old-refresh-token",
        token_store.TOKEN_URL: "https://auth-west.bullhornstaffing.com/oauth/token",
        token_store.CLIENT_ID: "client-id",
        token_store.CLIENT_SECRET: "client-secret",
    })


@pytest.fixture
def http():
    """Scripted requests.Session; set side_effect on get/post/request."""
    session = MagicMock()
    session.headers = {}
    return session

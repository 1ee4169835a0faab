import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from blogauth.app import create_app
from blogauth.auth.users import UserStore
from blogauth.config import AuthSettings

TEST_SECRET = "test-secret-0123456789abcdef"


@pytest.fixture()
def settings(tmp_path: Path) -> AuthSettings:
    return AuthSettings(
        secret_key=TEST_SECRET,
        access_token_seconds=900,
        refresh_token_seconds=7 * 86400,
        environment="test",
        users_path=tmp_path / "data" / "users.yml",
    )


@pytest.fixture()
def store(settings: AuthSettings) -> UserStore:
    return UserStore(settings.users_path)


@pytest.fixture()
def client(settings: AuthSettings) -> TestClient:
    return TestClient(create_app(settings))


def set_cookies(response) -> Dict[str, str]:
    """Map cookie name -> raw Set-Cookie header for a response."""
    out: Dict[str, str] = {}
    headers = response.headers
    # httpx and Starlette spell the multi-value getter differently.
    raw = headers.get_list("set-cookie") if hasattr(headers, "get_list") else headers.getlist("set-cookie")
    for header in raw:
        name = header.split("=", 1)[0].strip()
        out[name] = header
    return out


def cookie_value(header: str) -> str:
    return header.split(";", 1)[0].split("=", 1)[1].strip().strip('"')

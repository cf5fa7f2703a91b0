from datetime import date

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from family_tree.config import Settings
from family_tree.dependencies import get_today
from family_tree.main import create_app

JWT_SECRET = "test-jwt-secret"
TODAY = date(2024, 6, 1)

_ENV_NAMES = [
    "BACKEND",
    "SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "SUPABASE_JWT_SECRET",
    "DATABASE_URL",
    "LOCAL_MEDIA_PATH",
    "BASE_URL",
    "MAX_IMAGE_SIZE",
    "DATE_DISPLAY_FORMAT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def local_settings(clean_env, tmp_path):
    clean_env.setenv("BACKEND", "local")
    clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    clean_env.setenv("LOCAL_MEDIA_PATH", str(tmp_path / "media"))
    clean_env.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    clean_env.setenv("BASE_URL", "http://testserver")
    return Settings()


@pytest.fixture
def app(local_settings):
    app = create_app(local_settings)
    app.dependency_overrides[get_today] = lambda: TODAY
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def make_token(user_id: str, secret: str = JWT_SECRET) -> str:
    return jwt.encode(
        {"sub": user_id, "aud": "authenticated"},
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token('user-1')}"}


@pytest.fixture
def other_user_headers():
    return {"Authorization": f"Bearer {make_token('user-2')}"}

import pytest

from family_tree.config import Settings
from family_tree.errors import ConfigurationError


def test_postgres_url_is_rewritten(clean_env):
    clean_env.setenv("DATABASE_URL", "postgres://u:p@db/family")

    assert Settings().DATABASE_URL == "postgresql://u:p@db/family"


def test_next_public_names_are_accepted(clean_env):
    clean_env.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://proj.supabase.co")
    clean_env.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "anon-key-0123456789abcdefghij")
    clean_env.setenv("SUPABASE_JWT_SECRET", "secret")

    settings = Settings()

    assert settings.SUPABASE_URL == "https://proj.supabase.co"
    assert settings.SUPABASE_KEY == "anon-key-0123456789abcdefghij"
    settings.require_backend_settings()


def test_config_checks_mask_secrets(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://proj.supabase.co")
    clean_env.setenv("SUPABASE_KEY", "k" * 40)

    checks = {c["name"]: c for c in Settings().config_checks()}

    assert checks["SUPABASE_URL"]["value"] == "https://proj.supabase.co"
    assert checks["SUPABASE_KEY"]["value"] == "k" * 20 + "..."
    assert checks["SUPABASE_JWT_SECRET"]["status"] == "error"
    assert checks["SUPABASE_JWT_SECRET"]["value"] is None


def test_missing_settings_raise(clean_env):
    with pytest.raises(ConfigurationError) as excinfo:
        Settings().require_backend_settings()

    assert "SUPABASE_URL" in str(excinfo.value)
    assert len(excinfo.value.checks) == 3


def test_unknown_backend_raises(clean_env):
    clean_env.setenv("BACKEND", "mongo")
    clean_env.setenv("SUPABASE_JWT_SECRET", "secret")

    with pytest.raises(ConfigurationError, match="Invalid BACKEND"):
        Settings().require_backend_settings()

from supabase import Client, create_client

from family_tree.config import Settings
from family_tree.errors import ConfigurationError


def create_supabase_client(settings: Settings) -> Client:
    """
    Build the Supabase client. Called once from create_app; the instance
    lives on app.state and is shared by the people store and image storage.
    """
    settings.require_backend_settings()

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as exc:
        # supabase-py rejects malformed URLs and keys at construction
        raise ConfigurationError(
            f"Supabase client could not be created: {exc}",
            checks=settings.config_checks(),
        ) from exc

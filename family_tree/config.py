import os
from dotenv import load_dotenv

from family_tree.errors import ConfigurationError

# Load .env file if it exists
load_dotenv()


def _env(*names: str, default: str | None = None) -> str | None:
    """
    First non-empty value among several env names.
    """
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


class Settings:
    def __init__(self):
        # -------------------------------------------------------
        # Project
        # -------------------------------------------------------
        self.PROJECT_NAME: str = "Family Tree API"
        self.ENV: str = os.getenv("ENV", "dev")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # "supabase" (default) or "local" (SQLAlchemy + media folder)
        self.BACKEND: str = os.getenv("BACKEND", "supabase").lower()

        # -------------------------------------------------------
        # Supabase (the web client used the NEXT_PUBLIC_ names)
        # -------------------------------------------------------
        self.SUPABASE_URL: str | None = _env(
            "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"
        )
        # Server-side key; queries are always filtered by user_id
        self.SUPABASE_KEY: str | None = _env(
            "SUPABASE_KEY",
            "SUPABASE_SERVICE_ROLE_KEY",
            "SUPABASE_ANON_KEY",
            "NEXT_PUBLIC_SUPABASE_ANON_KEY",
        )
        self.SUPABASE_JWT_SECRET: str | None = os.getenv("SUPABASE_JWT_SECRET")
        self.SUPABASE_BUCKET: str = os.getenv("SUPABASE_BUCKET", "family-tree")
        self.PEOPLE_TABLE: str = os.getenv("PEOPLE_TABLE", "people")

        # -------------------------------------------------------
        # Local backend
        # -------------------------------------------------------
        database_url = os.getenv("DATABASE_URL", "sqlite:///./family_tree.db")

        # Render uses postgres:// but SQLAlchemy needs postgresql://
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        self.DATABASE_URL: str = database_url

        self.LOCAL_MEDIA_PATH: str = os.getenv("LOCAL_MEDIA_PATH", "./media")

        # Public base URL (used to build absolute media URLs)
        self.BASE_URL: str = os.getenv("BASE_URL", "http://127.0.0.1:8000")

        # -------------------------------------------------------
        # Display / limits
        # -------------------------------------------------------
        self.DATE_DISPLAY_FORMAT: str = os.getenv("DATE_DISPLAY_FORMAT", "%m/%d/%Y")
        self.RECENT_ADDITIONS_LIMIT: int = int(os.getenv("RECENT_ADDITIONS_LIMIT", 5))
        self.MAX_IMAGE_SIZE: int = int(
            os.getenv("MAX_IMAGE_SIZE", 5 * 1024 * 1024)
        )

    # -------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------
    def required_settings(self) -> dict[str, str | None]:
        required = {"SUPABASE_JWT_SECRET": self.SUPABASE_JWT_SECRET}
        if self.BACKEND == "supabase":
            required = {
                "SUPABASE_URL": self.SUPABASE_URL,
                "SUPABASE_KEY": self.SUPABASE_KEY,
                **required,
            }
        return required

    def config_checks(self) -> list[dict]:
        """
        One entry per required setting, shaped for the diagnostic panel.
        Secrets are masked to their first 20 characters.
        """
        checks = []
        for name, value in self.required_settings().items():
            shown = value
            if value and name != "SUPABASE_URL":
                shown = f"{value[:20]}..."
            checks.append({
                "name": name,
                "status": "ok" if value else "error",
                "message": (
                    "Environment variable is set"
                    if value
                    else "Environment variable is missing"
                ),
                "value": shown,
            })
        return checks

    def require_backend_settings(self) -> None:
        if self.BACKEND not in ("supabase", "local"):
            raise ConfigurationError(
                f"Invalid BACKEND {self.BACKEND!r} (expected 'supabase' or 'local')",
                checks=self.config_checks(),
            )

        missing = [
            name for name, value in self.required_settings().items() if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing required settings: " + ", ".join(missing),
                checks=self.config_checks(),
            )


# Single instance that is imported everywhere
settings = Settings()

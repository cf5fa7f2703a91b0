import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from family_tree.config import Settings, settings as default_settings
from family_tree.core.family_service import FamilyService
from family_tree.database import make_session_factory
from family_tree.errors import (
    ConfigurationError,
    FetchError,
    MutationError,
    PersonNotFoundError,
)
from family_tree.people_store import SqlPeopleStore, SupabasePeopleStore
from family_tree.storage import LocalImageStorage, SupabaseImageStorage
from family_tree.supabase_client import create_supabase_client

# Routers
from family_tree.routers import (
    auth_router,
    health_router,
    people_router,
    tree_router,
)

logger = logging.getLogger(__name__)


# -----------------------
# COLLABORATORS (built once)
# -----------------------
def build_family_service(settings: Settings) -> FamilyService:
    settings.require_backend_settings()

    if settings.BACKEND == "local":
        store = SqlPeopleStore(make_session_factory(settings.DATABASE_URL))
        storage = LocalImageStorage(settings.LOCAL_MEDIA_PATH, settings.BASE_URL)
    else:
        client = create_supabase_client(settings)
        store = SupabasePeopleStore(client, table=settings.PEOPLE_TABLE)
        storage = SupabaseImageStorage(client, bucket=settings.SUPABASE_BUCKET)

    return FamilyService(store, storage, max_image_size=settings.MAX_IMAGE_SIZE)


# -----------------------
# ERROR RESPONSES
# -----------------------
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        return JSONResponse(
            status_code=503,
            content={
                "error": "configuration",
                "detail": str(exc),
                "checks": exc.checks,
            },
        )

    @app.exception_handler(FetchError)
    async def fetch_error(request: Request, exc: FetchError):
        return JSONResponse(
            status_code=502,
            content={"error": "fetch_failed", "detail": str(exc), "retry": True},
        )

    @app.exception_handler(MutationError)
    async def mutation_error(request: Request, exc: MutationError):
        # Echo what was sent so the form can be resubmitted as-is
        return JSONResponse(
            status_code=502,
            content={
                "error": "mutation_failed",
                "detail": str(exc),
                "submitted": exc.submitted,
            },
        )

    @app.exception_handler(PersonNotFoundError)
    async def person_not_found(request: Request, exc: PersonNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})


# -----------------------
# CREATE APP
# -----------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Backend API for recording family members and viewing them as a tree.",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.config_error = None
    app.state.family_service = None

    # A broken configuration blocks data routes (503), not startup
    try:
        app.state.family_service = build_family_service(settings)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        app.state.config_error = exc

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Local pictures are served from the media folder
    if settings.BACKEND == "local":
        os.makedirs(settings.LOCAL_MEDIA_PATH, exist_ok=True)
        app.mount(
            "/media",
            StaticFiles(directory=settings.LOCAL_MEDIA_PATH),
            name="media",
        )

    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(people_router.router)
    app.include_router(tree_router.router)

    return app


app = create_app()

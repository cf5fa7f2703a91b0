from fastapi import APIRouter, Depends, Request

from family_tree.config import Settings
from family_tree.dependencies import get_settings
from family_tree.schemas.tree_schema import ConfigReport

router = APIRouter(tags=["Health"])


@router.get("/")
def root():
    return {"message": "Family Tree API is running!"}


# --------------------------------------------------
# CONFIGURATION DIAGNOSTICS (never blocked)
# --------------------------------------------------
@router.get("/health/config", response_model=ConfigReport)
def config_report(request: Request, settings: Settings = Depends(get_settings)):
    return {
        "ok": request.app.state.config_error is None,
        "backend": settings.BACKEND,
        "checks": settings.config_checks(),
    }

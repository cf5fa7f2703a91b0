"""
Dependency wiring for the FastAPI app.

Collaborators are built once in create_app and kept on app.state;
these helpers only hand them out.
"""

from datetime import date

from fastapi import Request

from family_tree.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_configured(request: Request) -> None:
    """Every data route is blocked while the configuration is broken."""
    error = getattr(request.app.state, "config_error", None)
    if error is not None:
        raise error


def get_family_service(request: Request):
    require_configured(request)
    return request.app.state.family_service


def get_today() -> date:
    """Today's date for age display; overridden in tests."""
    return date.today()

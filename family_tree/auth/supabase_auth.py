import logging

from fastapi import Depends, Header, HTTPException
from jose import JWTError, jwt

from family_tree.config import Settings
from family_tree.dependencies import get_settings, require_configured

logger = logging.getLogger(__name__)


def get_current_user(
    authorization: str = Header(None),
    settings: Settings = Depends(get_settings),
    _configured: None = Depends(require_configured),
) -> str:
    """
    User id (``sub``) from a Supabase access token.
    No token means no session; the client sends the user to login.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid auth header")

    token = authorization.replace("Bearer ", "", 1)

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except JWTError as exc:
        logger.info("Rejected token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    return user_id

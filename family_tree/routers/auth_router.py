from fastapi import APIRouter, Depends

from family_tree.auth.supabase_auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


# -------------------- ME ---------------------

@router.get("/me")
def get_me(current_user: str = Depends(get_current_user)):
    return {"id": current_user}

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from family_tree.auth.supabase_auth import get_current_user
from family_tree.config import Settings
from family_tree.core.family_service import FamilyService
from family_tree.core.family_stats import family_statistics, recent_additions
from family_tree.core.tree_builder import FamilyTree
from family_tree.core.tree_renderer import Selection, TreeRenderer, find_node
from family_tree.dependencies import get_family_service, get_settings, get_today
from family_tree.schemas.tree_schema import TreePage

router = APIRouter(prefix="/tree", tags=["Family Tree"])


@router.get("", response_model=TreePage)
def get_tree(
    selected: Optional[str] = None,
    toggle: Optional[str] = None,
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
):
    """
    Whole forest for the current user, plus the statistics and
    recent-additions panels and the selected person's detail panel.

    ``selected`` is the current selection; ``toggle`` is the person the
    user just clicked (clicking the selected person again deselects).
    """
    people = service.load(current_user)

    selection = Selection(selected)
    selection.toggle(toggle)

    tree = FamilyTree(people)
    renderer = TreeRenderer(
        tree,
        today=today,
        date_format=settings.DATE_DISPLAY_FORMAT,
        selected_id=selection.selected_id,
    )
    view = renderer.render_forest()

    # Unknown ids select nothing
    detail = find_node(view.roots, selection.selected_id)

    return TreePage(
        roots=view.roots,
        is_empty=view.is_empty,
        empty_message=view.empty_message,
        cycle_detected=view.cycle_detected,
        stats=family_statistics(people),
        recent_additions=recent_additions(
            people,
            limit=settings.RECENT_ADDITIONS_LIMIT,
            date_format=settings.DATE_DISPLAY_FORMAT,
        ),
        selected_id=detail.id if detail else None,
        selected=detail,
    )

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class OccasionOut(BaseModel):
    name: str
    date: str
    description: Optional[str] = None


# ---------------------------------------------------------
# ONE RENDERED PERSON (recursive)
# ---------------------------------------------------------
class DisplayNode(BaseModel):
    id: str
    depth: int

    first_name: str
    last_name: str
    full_name: str

    # Avatar: picture when set, otherwise the initials placeholder
    profile_picture_url: Optional[str] = None
    initials: str

    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    marriage_date: Optional[str] = None
    age: Optional[str] = None
    is_deceased: bool = False

    spouse_id: Optional[str] = None
    spouse_name: Optional[str] = None

    special_occasions: list[OccasionOut] = Field(default_factory=list)

    is_selected: bool = False
    cycle_detected: bool = False

    children: list[DisplayNode] = Field(default_factory=list)


DisplayNode.model_rebuild()


# ---------------------------------------------------------
# SIDE PANELS
# ---------------------------------------------------------
class FamilyStats(BaseModel):
    total_members: int
    living_members: int
    married_members: int


class RecentAddition(BaseModel):
    id: str
    full_name: str
    initials: str
    added_on: Optional[str] = None


# ---------------------------------------------------------
# WHOLE FOREST
# ---------------------------------------------------------
class FamilyTreeView(BaseModel):
    roots: list[DisplayNode] = Field(default_factory=list)
    is_empty: bool = False
    empty_message: Optional[str] = None
    cycle_detected: bool = False


class TreePage(FamilyTreeView):
    stats: FamilyStats
    recent_additions: list[RecentAddition] = Field(default_factory=list)

    selected_id: Optional[str] = None
    selected: Optional[DisplayNode] = None


class ConfigCheck(BaseModel):
    name: str
    status: str
    message: str
    value: Optional[str] = None


class ConfigReport(BaseModel):
    ok: bool
    backend: str
    checks: list[ConfigCheck]

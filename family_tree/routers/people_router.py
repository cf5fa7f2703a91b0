from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from family_tree.auth.supabase_auth import get_current_user
from family_tree.core.family_service import FamilyService
from family_tree.core.tree_builder import FamilyTree
from family_tree.dependencies import get_family_service
from family_tree.schemas.person_schema import (
    FormOptions,
    Person,
    PersonCreate,
    PersonSaved,
    PersonUpdate,
    PictureUploaded,
)

router = APIRouter(prefix="/people", tags=["People"])


# --------------------------------------------------
# LIST (newest first)
# --------------------------------------------------
@router.get("", response_model=List[Person])
def list_people(
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    return service.load(current_user)


# --------------------------------------------------
# ADD PERSON
# --------------------------------------------------
@router.post("", response_model=PersonSaved, status_code=201)
def add_person(
    payload: PersonCreate,
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    result = service.save_person(current_user, payload)
    return {"person": result.person, "people": result.people}


# --------------------------------------------------
# PARENT / SPOUSE CHOICES FOR THE FORM
# --------------------------------------------------
@router.get("/form-options", response_model=FormOptions)
def form_options(
    person_id: Optional[str] = None,
    parent_id: Optional[str] = None,
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    if parent_id in ("", "none"):
        parent_id = None

    tree = FamilyTree(service.load(current_user))
    return {
        "parents": tree.parent_candidates(person_id),
        "spouses": tree.spouse_candidates(person_id, parent_id),
    }


# --------------------------------------------------
# PROFILE PICTURE
# --------------------------------------------------
@router.post("/picture", response_model=PictureUploaded)
def upload_picture(
    file: UploadFile = File(...),
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    return {"url": service.upload_picture(current_user, file)}


# --------------------------------------------------
# GET / UPDATE ONE PERSON
# --------------------------------------------------
@router.get("/{person_id}", response_model=Person)
def get_person(
    person_id: str,
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    person = service.get_person(current_user, person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.put("/{person_id}", response_model=PersonSaved)
def update_person(
    person_id: str,
    payload: PersonUpdate,
    current_user: str = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    result = service.save_person(current_user, payload, person_id=person_id)
    return {"person": result.person, "people": result.people}

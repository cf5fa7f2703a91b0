import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, UploadFile

from family_tree.people_store import PeopleStore
from family_tree.schemas.person_schema import Person, PersonCreate, PersonUpdate
from family_tree.storage import (
    MAX_IMAGE_SIZE,
    ImageStorage,
    image_extension,
    validate_file_size,
)

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    person: Person
    people: list[Person]


class FamilyService:
    """
    Reads and writes go straight to the collaborators. A successful
    write is always followed by a full reload of the owner's people.
    """

    def __init__(
        self,
        store: PeopleStore,
        storage: ImageStorage,
        max_image_size: int = MAX_IMAGE_SIZE,
    ):
        self.store = store
        self.storage = storage
        self.max_image_size = max_image_size

    def load(self, owner_id: str) -> list[Person]:
        return self.store.list_people(owner_id)

    def get_person(self, owner_id: str, person_id: str) -> Optional[Person]:
        return self.store.get_person(owner_id, person_id)

    def save_person(
        self,
        owner_id: str,
        payload: PersonCreate | PersonUpdate,
        person_id: Optional[str] = None,
    ) -> SaveResult:
        # The form never offers the person as their own parent or spouse
        if person_id is not None:
            if payload.parent_id == person_id:
                raise HTTPException(400, "A person cannot be their own parent")
            if payload.spouse_id == person_id:
                raise HTTPException(400, "A person cannot be their own spouse")

        record = payload.to_record()

        if person_id is None:
            person = self.store.insert_person(owner_id, record)
            logger.info("Added person %s for %s", person.id, owner_id)
        else:
            person = self.store.update_person(owner_id, person_id, record)
            logger.info("Updated person %s for %s", person.id, owner_id)

        return SaveResult(person=person, people=self.load(owner_id))

    def upload_picture(self, owner_id: str, upload: UploadFile) -> str:
        if not image_extension(upload.filename):
            raise HTTPException(400, "Unsupported file type")

        # Measure before reading so oversize uploads are never buffered
        upload.file.seek(0, os.SEEK_END)
        size = upload.file.tell()
        upload.file.seek(0)

        ok, message = validate_file_size(size, self.max_image_size)
        if not ok:
            raise HTTPException(413 if size else 400, message)

        contents = upload.file.read()

        return self.storage.upload_image(
            owner_id,
            upload.filename,
            contents,
            upload.content_type or "application/octet-stream",
        )

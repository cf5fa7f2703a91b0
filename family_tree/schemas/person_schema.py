# family_tree/schemas/person_schema.py
import datetime
import json
import logging
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

# Values the web form submits for "no parent" / "no spouse"
_EMPTY_REFERENCES = {"", "none", "null"}


# ---------------------------------------------------------
# SPECIAL OCCASIONS
# ---------------------------------------------------------
class SpecialOccasion(BaseModel):
    id: Optional[str] = None
    name: str = Field(validation_alias=AliasChoices("name", "title"))
    date: datetime.date
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Occasion name is required")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def parse_special_occasions(raw: Any) -> list[SpecialOccasion]:
    """
    Turn the stored occasions blob into typed records.

    Accepts a list, a JSON string or None. Entries that do not validate
    are dropped (and logged); a blob that is not a list yields [].
    """
    if raw is None or raw == "":
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Dropping unparsable special_occasions blob")
            return []

    if not isinstance(raw, list):
        logger.warning(
            "Dropping special_occasions of type %s (expected list)",
            type(raw).__name__,
        )
        return []

    occasions = []
    for index, item in enumerate(raw):
        if isinstance(item, SpecialOccasion):
            occasions.append(item)
            continue
        try:
            occasions.append(SpecialOccasion.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed special occasion #%d: %s",
                index,
                exc.errors()[0]["msg"] if exc.errors() else exc,
            )
    return occasions


# ---------------------------------------------------------
# SHARED NORMALISATION
# ---------------------------------------------------------
class _PersonFields(BaseModel):
    """
    Normalisation shared by stored rows and form payloads.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @field_validator("parent_id", "spouse_id", mode="before", check_fields=False)
    @classmethod
    def _empty_reference(cls, v):
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() in _EMPTY_REFERENCES:
            return None
        return str(v)

    @field_validator(
        "date_of_birth",
        "date_of_death",
        "marriage_date",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _blank_date(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("profile_picture_url", mode="before", check_fields=False)
    @classmethod
    def _blank_picture(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("first_name", "last_name", check_fields=False)
    @classmethod
    def _name_not_blank(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("special_occasions", mode="before", check_fields=False)
    @classmethod
    def _occasions(cls, v):
        return parse_special_occasions(v)


# ---------------------------------------------------------
# STORED PERSON
# ---------------------------------------------------------
class Person(_PersonFields):
    id: str
    first_name: str
    last_name: str

    date_of_birth: Optional[datetime.date] = None
    date_of_death: Optional[datetime.date] = None
    marriage_date: Optional[datetime.date] = None

    profile_picture_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profile_picture_url", "profile_picture"),
    )

    parent_id: Optional[str] = None
    spouse_id: Optional[str] = None

    special_occasions: list[SpecialOccasion] = Field(default_factory=list)

    user_id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        if v is None:
            return None
        return str(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


# ---------------------------------------------------------
# FORM PAYLOADS
# ---------------------------------------------------------
class PersonCreate(_PersonFields):
    first_name: str
    last_name: str

    date_of_birth: Optional[datetime.date] = None
    date_of_death: Optional[datetime.date] = None
    marriage_date: Optional[datetime.date] = None

    profile_picture_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profile_picture_url", "profile_picture"),
    )

    parent_id: Optional[str] = None
    spouse_id: Optional[str] = None

    special_occasions: list[SpecialOccasion] = Field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        """
        Column dict for the storage collaborator (JSON-safe values).
        """
        return _to_record(self.model_dump(mode="json"))


class PersonUpdate(_PersonFields):
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    date_of_birth: Optional[datetime.date] = None
    date_of_death: Optional[datetime.date] = None
    marriage_date: Optional[datetime.date] = None

    profile_picture_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profile_picture_url", "profile_picture"),
    )

    parent_id: Optional[str] = None
    spouse_id: Optional[str] = None

    special_occasions: Optional[list[SpecialOccasion]] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _names_not_null(cls, v):
        if v is None:
            raise ValueError("Name must not be empty")
        return v

    def to_record(self) -> dict[str, Any]:
        # Only what the form actually sent; explicit nulls clear a field
        return _to_record(self.model_dump(mode="json", exclude_unset=True))


def _to_record(data: dict[str, Any]) -> dict[str, Any]:
    if "profile_picture_url" in data:
        data["profile_picture"] = data.pop("profile_picture_url")
    return data


# ---------------------------------------------------------
# OUTPUT
# ---------------------------------------------------------
class PersonSaved(BaseModel):
    person: Person
    people: list[Person]


class FormOptions(BaseModel):
    parents: list[Person]
    spouses: list[Person]


class PictureUploaded(BaseModel):
    url: str

"""
People persistence: Supabase table (production) or SQLAlchemy (local).

Rows are parsed into ``Person`` here, at the collaborator boundary.
Read failures raise FetchError, write failures MutationError.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from family_tree.errors import FetchError, MutationError, PersonNotFoundError
from family_tree.models.person import Person as PersonRow
from family_tree.schemas.person_schema import Person

logger = logging.getLogger(__name__)

_DATE_COLUMNS = ("date_of_birth", "date_of_death", "marriage_date")
_WRITABLE_COLUMNS = {
    "first_name",
    "last_name",
    "date_of_birth",
    "date_of_death",
    "marriage_date",
    "profile_picture",
    "parent_id",
    "spouse_id",
    "special_occasions",
}


class PeopleStore(Protocol):
    """Operations the app needs from the people store."""

    def list_people(self, owner_id: str) -> list[Person]:
        ...

    def get_person(self, owner_id: str, person_id: str) -> Optional[Person]:
        ...

    def insert_person(self, owner_id: str, record: dict[str, Any]) -> Person:
        ...

    def update_person(
        self, owner_id: str, person_id: str, record: dict[str, Any]
    ) -> Person:
        ...


# Bad values here are display omissions; they never cost the row
_OPTIONAL_FIELDS = {
    "date_of_birth",
    "date_of_death",
    "marriage_date",
    "profile_picture",
    "profile_picture_url",
    "parent_id",
    "spouse_id",
    "created_at",
}
_ROW_FIELDS = (
    "id",
    "user_id",
    "first_name",
    "last_name",
    "created_at",
    *sorted(_WRITABLE_COLUMNS),
)


def _row_dict(row: Any) -> dict[str, Any]:
    if isinstance(row, dict):
        return dict(row)
    return {name: getattr(row, name, None) for name in _ROW_FIELDS}


def parse_row(row: Any) -> Optional[Person]:
    """
    Validate one raw row.

    Optional fields that fail to parse are logged and cleared. Only a
    row without a usable id or name is skipped.
    """
    try:
        return Person.model_validate(row)
    except ValidationError as exc:
        errors = exc.errors()

    data = _row_dict(row)
    bad_fields = {str(e["loc"][0]) for e in errors if e.get("loc")}
    if bad_fields and bad_fields <= _OPTIONAL_FIELDS:
        logger.warning(
            "Person row %s: dropping unparsable %s",
            data.get("id"),
            ", ".join(sorted(bad_fields)),
        )
        for field in bad_fields:
            data[field] = None
        try:
            return Person.model_validate(data)
        except ValidationError as exc:
            errors = exc.errors()

    logger.warning("Skipping invalid person row %s: %s", data.get("id"), errors)
    return None


def parse_rows(rows: Iterable[Any]) -> list[Person]:
    return [person for person in map(parse_row, rows) if person is not None]


# ==========================================================
# SUPABASE
# ==========================================================
class SupabasePeopleStore:
    def __init__(self, client, table: str = "people"):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def list_people(self, owner_id: str) -> list[Person]:
        try:
            res = (
                self._query()
                .select("*")
                .eq("user_id", owner_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as exc:
            logger.exception("Error fetching people for %s", owner_id)
            raise FetchError(f"Error fetching people: {exc}") from exc

        return parse_rows(res.data or [])

    def get_person(self, owner_id: str, person_id: str) -> Optional[Person]:
        try:
            res = (
                self._query()
                .select("*")
                .eq("id", person_id)
                .eq("user_id", owner_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            logger.exception("Error fetching person %s", person_id)
            raise FetchError(f"Error fetching person: {exc}") from exc

        people = parse_rows(res.data or [])
        return people[0] if people else None

    def insert_person(self, owner_id: str, record: dict[str, Any]) -> Person:
        row = {**record, "user_id": owner_id}
        try:
            res = self._query().insert(row).execute()
        except Exception as exc:
            logger.exception("Insert into %s failed", self.table)
            raise MutationError(str(exc), submitted=record) from exc

        if not res.data:
            raise MutationError("Insert returned no row", submitted=record)
        return Person.model_validate(res.data[0])

    def update_person(
        self, owner_id: str, person_id: str, record: dict[str, Any]
    ) -> Person:
        try:
            res = (
                self._query()
                .update(record)
                .eq("id", person_id)
                .eq("user_id", owner_id)
                .execute()
            )
        except Exception as exc:
            logger.exception("Update of person %s failed", person_id)
            raise MutationError(str(exc), submitted=record) from exc

        # Row-level security hides other users' rows, so no row == not found
        if not res.data:
            raise PersonNotFoundError(person_id)
        return Person.model_validate(res.data[0])


# ==========================================================
# LOCAL (SQLALCHEMY)
# ==========================================================
def _columns(record: dict[str, Any]) -> dict[str, Any]:
    values = {k: v for k, v in record.items() if k in _WRITABLE_COLUMNS}
    for key in _DATE_COLUMNS:
        if isinstance(values.get(key), str):
            values[key] = date.fromisoformat(values[key])
    return values


class SqlPeopleStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def list_people(self, owner_id: str) -> list[Person]:
        db = self.session_factory()
        try:
            rows = (
                db.query(PersonRow)
                .filter(PersonRow.user_id == owner_id)
                .order_by(PersonRow.created_at.desc())
                .all()
            )
            return parse_rows(rows)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching people for %s", owner_id)
            raise FetchError(f"Error fetching people: {exc}") from exc
        finally:
            db.close()

    def get_person(self, owner_id: str, person_id: str) -> Optional[Person]:
        db = self.session_factory()
        try:
            row = (
                db.query(PersonRow)
                .filter(PersonRow.id == person_id, PersonRow.user_id == owner_id)
                .first()
            )
            people = parse_rows([row]) if row else []
            return people[0] if people else None
        except SQLAlchemyError as exc:
            raise FetchError(f"Error fetching person: {exc}") from exc
        finally:
            db.close()

    def insert_person(self, owner_id: str, record: dict[str, Any]) -> Person:
        db = self.session_factory()
        try:
            row = PersonRow(user_id=owner_id, **_columns(record))
            db.add(row)
            db.commit()
            db.refresh(row)
            return Person.model_validate(row)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Insert into people failed")
            raise MutationError(str(exc), submitted=record) from exc
        finally:
            db.close()

    def update_person(
        self, owner_id: str, person_id: str, record: dict[str, Any]
    ) -> Person:
        db = self.session_factory()
        try:
            row = (
                db.query(PersonRow)
                .filter(PersonRow.id == person_id, PersonRow.user_id == owner_id)
                .first()
            )
            if not row:
                raise PersonNotFoundError(person_id)

            for key, value in _columns(record).items():
                setattr(row, key, value)

            db.commit()
            db.refresh(row)
            return Person.model_validate(row)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Update of person %s failed", person_id)
            raise MutationError(str(exc), submitted=record) from exc
        finally:
            db.close()

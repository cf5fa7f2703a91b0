from datetime import date

import pytest
from pydantic import ValidationError

from family_tree.schemas.person_schema import (
    Person,
    PersonCreate,
    PersonUpdate,
    parse_special_occasions,
)


def test_parse_occasions_drops_malformed_entries():
    occasions = parse_special_occasions([
        {"id": "1", "name": "Graduation", "date": "2001-06-01", "description": ""},
        {"name": "", "date": "2001-06-01"},
        {"name": "No date"},
        {"name": "Bad date", "date": "not-a-date"},
        "just a string",
        {"title": "Anniversary", "date": "2010-09-09", "description": "Tenth"},
    ])

    assert [o.name for o in occasions] == ["Graduation", "Anniversary"]
    assert occasions[0].description is None
    assert occasions[1].date == date(2010, 9, 9)
    assert occasions[1].description == "Tenth"


def test_parse_occasions_accepts_json_blob():
    occasions = parse_special_occasions('[{"name": "Baptism", "date": "1990-02-03"}]')

    assert occasions[0].name == "Baptism"


@pytest.mark.parametrize("raw", [None, "", "{not json", {"name": "x"}, 42])
def test_parse_occasions_bad_blob_is_empty(raw):
    assert parse_special_occasions(raw) == []


def test_person_normalises_form_values():
    person = Person.model_validate({
        "id": 7,
        "first_name": "  Ada ",
        "last_name": "Lovelace",
        "date_of_birth": "1815-12-10",
        "date_of_death": "",
        "marriage_date": None,
        "profile_picture": "https://example.test/ada.png",
        "parent_id": "none",
        "spouse_id": "",
        "special_occasions": None,
        "user_id": "user-1",
    })

    assert person.id == "7"
    assert person.first_name == "Ada"
    assert person.date_of_birth == date(1815, 12, 10)
    assert person.date_of_death is None
    assert person.profile_picture_url == "https://example.test/ada.png"
    assert person.parent_id is None
    assert person.spouse_id is None
    assert person.special_occasions == []
    assert person.full_name == "Ada Lovelace"
    assert person.initials == "AL"


def test_person_requires_names():
    with pytest.raises(ValidationError):
        Person(id="1", first_name="  ", last_name="Doe")

    with pytest.raises(ValidationError):
        PersonCreate(first_name="Ann")


def test_create_record_uses_stored_column_names():
    payload = PersonCreate.model_validate({
        "first_name": "Ann",
        "last_name": "Lee",
        "date_of_birth": "1950-03-04",
        "profile_picture_url": "https://example.test/ann.png",
        "parent_id": "none",
        "special_occasions": [{"name": "Wedding", "date": "1975-06-21"}],
    })
    record = payload.to_record()

    assert record["profile_picture"] == "https://example.test/ann.png"
    assert "profile_picture_url" not in record
    assert record["date_of_birth"] == "1950-03-04"
    assert record["parent_id"] is None
    assert record["special_occasions"] == [
        {"id": None, "name": "Wedding", "date": "1975-06-21", "description": None}
    ]


def test_update_record_only_contains_sent_fields():
    record = PersonUpdate.model_validate({"last_name": "Smith", "parent_id": ""}).to_record()

    assert record == {"last_name": "Smith", "parent_id": None}


def test_update_rejects_null_name():
    with pytest.raises(ValidationError):
        PersonUpdate.model_validate({"first_name": None})

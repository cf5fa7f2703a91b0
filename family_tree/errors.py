from typing import Any


class FamilyTreeError(Exception):
    """Base exception for family tree failures."""


class ConfigurationError(FamilyTreeError):
    """
    Required connection settings are absent or invalid.
    Blocks every data request until fixed, never the process.
    """

    def __init__(self, message: str, checks: list[dict] | None = None):
        super().__init__(message)
        self.checks = checks or []


class FetchError(FamilyTreeError):
    """Reading people from the storage collaborator failed."""


class MutationError(FamilyTreeError):
    """An insert, update or upload failed. Carries the submitted form data."""

    def __init__(self, message: str, submitted: Any = None):
        super().__init__(message)
        self.submitted = submitted


class PersonNotFoundError(FamilyTreeError):
    """Raised when an update targets a person the owner does not have."""

    def __init__(self, person_id: str):
        super().__init__(f"Person {person_id} not found")
        self.person_id = person_id

"""Enums for the Schoolhouse domain models."""

from enum import StrEnum


class EnrollmentDecision(StrEnum):
    """A family's attendance decision for one student in one school year.

    The values are the labels stored on contracts and shown to families.
    """

    FULL_TIME = "Full Time"
    PART_TIME = "Part Time"
    NOT_ATTENDING = "Not Attending"

    @property
    def is_attending(self) -> bool:
        return self in (EnrollmentDecision.FULL_TIME, EnrollmentDecision.PART_TIME)


class UserRole(StrEnum):
    """Portal user roles."""

    ADMIN = "admin"
    STAFF = "staff"
    PARENT = "parent"

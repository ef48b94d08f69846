"""Family, guardian and student records."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Guardian(BaseModel):
    """A parent or guardian attached to a family."""

    id: str
    first_name: str
    last_name: str = ""
    email: str = ""
    other_emails: str | None = None
    cell_phone: str | None = None
    work_phone: str | None = None
    relationship: str | None = None
    occupation: str | None = None
    notes: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Student(BaseModel):
    """A student belonging to a family."""

    id: str
    first_name: str
    middle_name: str | None = None
    last_name: str = ""
    preferred_name: str | None = None
    birthdate: str | None = None
    grade: str | None = None
    media_release: bool = False
    sign_self_out: bool = False

    @property
    def display_name(self) -> str:
        return self.preferred_name or self.first_name


class EmergencyContact(BaseModel):
    first_name: str
    last_name: str | None = None
    cell_phone: str | None = None
    work_phone: str | None = None
    relationship: str | None = None
    notes: str | None = None

    def __str__(self) -> str:
        text = self.first_name
        if self.relationship:
            text += f" ({self.relationship})"
        if self.cell_phone:
            text += f" {self.cell_phone}"
        return text


class MedicalProvider(BaseModel):
    name: str
    phone: str | None = None
    type: str | None = None
    office: str | None = None


class Family(BaseModel):
    """A household: guardians, students and the income used for tuition."""

    id: str
    name: str = ""
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None
    gross_family_income: float | None = Field(default=None, ge=0)
    sliding_scale_opt_out: bool = False
    guardians: list[Guardian] = Field(default_factory=list)
    students: list[Student] = Field(default_factory=list)
    emergency_contacts: list[EmergencyContact] = Field(default_factory=list)
    medical_providers: list[MedicalProvider] = Field(default_factory=list)
    authorized_emails: list[str] = Field(default_factory=list)

    @property
    def calculated_name(self) -> str:
        """Sorted unique last names of students and guardians, e.g. 'Lee / Park Family'."""
        last_names = sorted(
            {p.last_name.strip() for p in [*self.students, *self.guardians]}
        )
        return " / ".join(last_names) + " Family"

    @property
    def guardian_names(self) -> str:
        return ", ".join(g.first_name for g in self.guardians)

    def guardian(self, guardian_id: str) -> Guardian | None:
        for g in self.guardians:
            if g.id == guardian_id:
                return g
        return None

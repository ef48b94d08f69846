"""Contract, signature and enrollment records."""

from __future__ import annotations

from datetime import datetime  # noqa: TCH003 (pydantic resolves at runtime)

from pydantic import BaseModel, Field

from schoolhouse.models.enums import EnrollmentDecision


class SignatureData(BaseModel):
    """A guardian's captured signature."""

    data: str  # base64-encoded signature image
    date: datetime
    guardian_id: str


class Contract(BaseModel):
    """Enrollment contract for one family in one school year.

    The contract ID is the family ID; there is at most one contract per
    (year, family) pair.
    """

    id: str
    year_id: str
    family_id: str
    family_name: str = ""
    student_decisions: dict[str, EnrollmentDecision] = Field(default_factory=dict)
    tuition: float = Field(default=0.0, ge=0)
    assistance_amount: float = Field(default=0.0, ge=0)
    tuition_assistance_requested: bool = False
    tuition_assistance_granted: bool = False
    is_signed: bool = False
    suggested_tuition: float | None = None
    min_tuition: float | None = None
    last_saved_by: str | None = None
    last_saved_at: datetime | None = None
    signatures: dict[str, SignatureData] = Field(default_factory=dict)

    @property
    def student_count(self) -> int:
        """Number of students enrolled full or part time."""
        return sum(1 for d in self.student_decisions.values() if d.is_attending)

    def signed_by_all(self, guardian_ids: list[str]) -> bool:
        return bool(guardian_ids) and all(g in self.signatures for g in guardian_ids)


class Enrollment(BaseModel):
    """A student attending a school year. The ID is the student ID."""

    id: str
    year_id: str
    family_id: str
    family_name: str
    student_id: str
    student_name: str
    enrollment_type: EnrollmentDecision


class ContractDisplayRow(BaseModel):
    """A contract enriched with family names for list views."""

    contract: Contract
    family_name: str
    family_name_and_guardians: str
    full_time_names: str
    part_time_names: str

"""Input and output records for the tuition calculator."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator

from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.year import Year


class TuitionOptions(BaseModel):
    """Enrollment mix for one family in one year.

    Negative counts are clamped to zero rather than rejected; the result
    only feeds a display that a person confirms.
    """

    year: Year
    full_time: int = 0
    part_time: int = 0
    siblings: int = 0
    inflation_periods: int = 0

    @field_validator("full_time", "part_time", "siblings", "inflation_periods")
    @classmethod
    def clamp_negative_counts(cls, v: int) -> int:
        return max(v, 0)

    @property
    def attending_count(self) -> int:
        return self.full_time + self.part_time + self.siblings

    @classmethod
    def from_decisions(
        cls,
        decisions: dict[str, EnrollmentDecision],
        year: Year,
    ) -> TuitionOptions:
        """Count the enrollment mix from per-student decisions.

        The first full-time student pays the full rate; every further
        full-time student is a sibling. Part-time students are counted
        separately and Not Attending is ignored.
        """
        full_time = part_time = siblings = 0
        for decision in decisions.values():
            if decision == EnrollmentDecision.FULL_TIME:
                if full_time == 0:
                    full_time = 1
                else:
                    siblings += 1
            elif decision == EnrollmentDecision.PART_TIME:
                part_time += 1
        return cls(year=year, full_time=full_time, part_time=part_time, siblings=siblings)


class PriorContract(BaseModel):
    """The parts of last year's contract that stabilize this year's tuition."""

    tuition: float = 0.0
    student_decisions: dict[str, EnrollmentDecision] = Field(default_factory=dict)


class TuitionRequest(BaseModel):
    """Plain input record for a tuition quote."""

    year: Year
    student_decisions: dict[str, EnrollmentDecision] = Field(default_factory=dict)
    gross_family_income: float | None = None
    previous_contract: PriorContract | None = None

    @field_validator("gross_family_income")
    @classmethod
    def sanitize_income(cls, v: float | None) -> float | None:
        if v is None:
            return None
        if not math.isfinite(v) or v < 0:
            return 0.0
        return v


class TuitionQuote(BaseModel):
    """Plain output record of a tuition quote, in whole dollars."""

    full_time_tuition: int
    sibling_tuition: int
    part_time_tuition: int
    sliding_scale_tuition: int
    min_tuition: int
    suggested_tuition: int
    year_over_year_limited: bool = False
    year_over_year_band: tuple[int, int] | None = None


class SlidingScaleRow(BaseModel):
    """One income step of a year's published sliding scale."""

    income: int
    full_time: int
    part_time: int
    two_siblings_full_time: int
    three_siblings_full_time: int

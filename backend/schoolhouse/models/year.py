"""School-year configuration and tuition policy models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

DEFAULT_MINIMUM_INCOME = 28_000.0
DEFAULT_MAXIMUM_INCOME = 120_000.0
DEFAULT_MINIMUM_TUITION = 1_000.0
DEFAULT_MAXIMUM_TUITION = 12_500.0


class Year(BaseModel):
    """Sliding-scale bounds and registration flags for one school year.

    Years are reference data edited by an administrator. The income and
    tuition bounds are validated here, at creation time, so the calculator
    never sees an inverted scale.
    """

    id: str
    name: str
    minimum_income: float = Field(default=DEFAULT_MINIMUM_INCOME, ge=0)
    maximum_income: float = Field(default=DEFAULT_MAXIMUM_INCOME, ge=0)
    minimum_tuition: float = Field(default=DEFAULT_MINIMUM_TUITION, ge=0)
    maximum_tuition: float = Field(default=DEFAULT_MAXIMUM_TUITION, ge=0)
    is_accepting_registrations: bool = False
    is_accepting_intent_to_returns: bool = False

    @model_validator(mode="after")
    def bounds_are_ordered(self) -> Year:
        if self.minimum_income > self.maximum_income:
            msg = (
                f"minimum_income must not exceed maximum_income, "
                f"got {self.minimum_income} > {self.maximum_income}"
            )
            raise ValueError(msg)
        if self.minimum_tuition > self.maximum_tuition:
            msg = (
                f"minimum_tuition must not exceed maximum_tuition, "
                f"got {self.minimum_tuition} > {self.maximum_tuition}"
            )
            raise ValueError(msg)
        return self


class YearInput(BaseModel):
    """Year fields accepted from an administrator (the ID is assigned)."""

    name: str
    minimum_income: float = DEFAULT_MINIMUM_INCOME
    maximum_income: float = DEFAULT_MAXIMUM_INCOME
    minimum_tuition: float = DEFAULT_MINIMUM_TUITION
    maximum_tuition: float = DEFAULT_MAXIMUM_TUITION
    is_accepting_registrations: bool = False
    is_accepting_intent_to_returns: bool = False


class TuitionPolicy(BaseModel):
    """Policy constants applied on top of a Year's sliding scale.

    These are not stored on the Year record; they are configured per
    deployment (see ``schoolhouse.api.deps.load_policy``).
    """

    part_time_factor: float = Field(default=0.625, ge=0)
    sibling_factor: float = Field(default=0.5, ge=0)
    max_year_over_year_change: float = Field(default=0.10, ge=0, le=1)
    inflation_increase: float = Field(default=250.0, ge=0)
    steepness: float = Field(default=1.0, gt=0)

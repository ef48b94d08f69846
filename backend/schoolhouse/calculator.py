"""Sliding-scale tuition calculator.

The TuitionCalculator turns a family's income and attendance decisions into a
suggested tuition for one school year:

1. **Income fraction**: Clamp income into the year's
   ``[minimum_income, maximum_income]`` band and express it as a fraction
   ``f`` of that band (0 when the band is empty).
2. **Base tuition**: Interpolate ``minimum_tuition + curve(f) * range``.
   The curve is linear at the default steepness of 1.0.
3. **Enrollment mix**: Multiply the base by ``full_time +
   part_time * part_time_factor + siblings * sibling_factor`` and round to
   whole dollars.
4. **Minimum tuition**: Recompute at the maximum income when the family
   earns more than it, then hold the result within the year-over-year band
   around last year's tuition when attendance is unchanged.
5. **Suggestion**: The larger of the sliding-scale amount and the minimum,
   kept inside the year-over-year band when one applies.

The calculator holds only its policy and never caches results, so callers
can invoke it on every input change.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.tuition import (
    SlidingScaleRow,
    TuitionOptions,
    TuitionQuote,
    TuitionRequest,
)
from schoolhouse.models.year import TuitionPolicy

if TYPE_CHECKING:
    from schoolhouse.models.year import Year

logger = logging.getLogger(__name__)

_SCALE_START_INCOME = 10_000
_SCALE_INCOME_STEP = 5_000

CALCULATOR_VERSION = "0.1.0"


def round_dollars(amount: float) -> int:
    """Round half up to whole dollars."""
    return math.floor(amount + 0.5)


def decisions_changed(
    current: dict[str, EnrollmentDecision],
    previous: dict[str, EnrollmentDecision] | None,
) -> bool:
    """Return True if any student's decision differs from *previous*.

    Students present on only one side count as a change. No previous
    decisions at all is a change.
    """
    if previous is None:
        return True
    return any(
        current.get(student_id) != previous.get(student_id)
        for student_id in current.keys() | previous.keys()
    )


def assistance_amount(tuition: float, min_tuition: float) -> float:
    """Gap between the chosen tuition and the policy minimum, or 0."""
    if tuition < min_tuition:
        return min_tuition - tuition
    return 0.0


class TuitionCalculator:
    """Computes sliding-scale tuition figures for a family.

    Parameters
    ----------
    policy
        Discount factors, the year-over-year cap and the curve steepness.
        Defaults to ``TuitionPolicy()``.

    Example::

        calculator = TuitionCalculator()
        quote = calculator.quote(TuitionRequest(
            year=year,
            gross_family_income=60_000,
            student_decisions={"s1": EnrollmentDecision.FULL_TIME},
        ))
        quote.suggested_tuition
    """

    def __init__(self, policy: TuitionPolicy | None = None) -> None:
        self._policy = policy or TuitionPolicy()

    @property
    def policy(self) -> TuitionPolicy:
        return self._policy

    def tuition_for_income(self, income: float | None, options: TuitionOptions) -> int:
        """Total sliding-scale tuition for the enrollment mix in *options*.

        Absent, negative or non-finite income is treated as zero, which
        places the family at the bottom of the scale.
        """
        year = options.year
        effective_income = _sanitize_income(income)

        base = year.minimum_tuition + self._curve(
            self._income_fraction(effective_income, year)
        ) * (year.maximum_tuition - year.minimum_tuition)
        if effective_income > year.minimum_income:
            base += options.inflation_periods * self._policy.inflation_increase

        factor = (
            options.full_time
            + options.part_time * self._policy.part_time_factor
            + options.siblings * self._policy.sibling_factor
        )
        return round_dollars(base * factor)

    def minimum_tuition(
        self,
        income: float | None,
        options: TuitionOptions,
        previous_tuition: float | None = None,
        attendance_changed: bool = True,
    ) -> tuple[int, tuple[int, int] | None]:
        """Policy floor for the family's tuition.

        Returns ``(min_tuition, band)`` where *band* is the year-over-year
        ``(low, high)`` range when it was applied, else None.
        """
        year = options.year
        effective_income = _sanitize_income(income)
        if effective_income > year.maximum_income:
            effective_income = year.maximum_income
        floor = self.tuition_for_income(effective_income, options)

        if not previous_tuition or attendance_changed:
            return floor, None

        change = self._policy.max_year_over_year_change
        band = (
            round_dollars(previous_tuition * (1 - change)),
            round_dollars(previous_tuition * (1 + change)),
        )
        return min(max(floor, band[0]), band[1]), band

    def quote(self, request: TuitionRequest) -> TuitionQuote:
        """Compute every tuition figure shown while editing a contract."""
        year = request.year
        income = request.gross_family_income
        options = TuitionOptions.from_decisions(request.student_decisions, year)

        if options.attending_count == 0:
            return TuitionQuote(
                full_time_tuition=0,
                sibling_tuition=0,
                part_time_tuition=0,
                sliding_scale_tuition=0,
                min_tuition=0,
                suggested_tuition=0,
            )

        full_time = self.tuition_for_income(
            income, TuitionOptions(year=year, full_time=1)
        )
        with_sibling = self.tuition_for_income(
            income, TuitionOptions(year=year, full_time=1, siblings=1)
        )
        part_time = self.tuition_for_income(
            income, TuitionOptions(year=year, part_time=1)
        )
        sliding_scale = self.tuition_for_income(income, options)

        previous = request.previous_contract
        min_tuition, band = self.minimum_tuition(
            income,
            options,
            previous_tuition=previous.tuition if previous else None,
            attendance_changed=decisions_changed(
                request.student_decisions,
                previous.student_decisions if previous else None,
            ),
        )

        suggested = max(sliding_scale, min_tuition)
        if band is not None:
            suggested = min(suggested, band[1])

        return TuitionQuote(
            full_time_tuition=full_time,
            sibling_tuition=with_sibling - full_time,
            part_time_tuition=part_time,
            sliding_scale_tuition=sliding_scale,
            min_tuition=min_tuition,
            suggested_tuition=suggested,
            year_over_year_limited=band is not None,
            year_over_year_band=band,
        )

    def sliding_scale(self, year: Year) -> list[SlidingScaleRow]:
        """Published table of tuition by income, up to twice the maximum income."""
        rows: list[SlidingScaleRow] = []
        limit = year.maximum_income * 2
        income = _SCALE_START_INCOME
        while income <= limit:
            rows.append(SlidingScaleRow(
                income=income,
                full_time=self.tuition_for_income(
                    income, TuitionOptions(year=year, full_time=1)
                ),
                part_time=self.tuition_for_income(
                    income, TuitionOptions(year=year, part_time=1)
                ),
                two_siblings_full_time=self.tuition_for_income(
                    income, TuitionOptions(year=year, full_time=1, siblings=1)
                ),
                three_siblings_full_time=self.tuition_for_income(
                    income, TuitionOptions(year=year, full_time=1, siblings=2)
                ),
            ))
            income += _SCALE_INCOME_STEP
        return rows

    @staticmethod
    def _income_fraction(income: float, year: Year) -> float:
        income_range = year.maximum_income - year.minimum_income
        if income_range <= 0:
            return 0.0
        clamped = min(max(income, year.minimum_income), year.maximum_income)
        return (clamped - year.minimum_income) / income_range

    def _curve(self, x: float) -> float:
        """Map the income fraction onto the tuition fraction.

        Steepness 1.0 is the straight line; larger values bow the curve
        toward (1, 0) so middle incomes pay proportionally less.
        """
        steepness = self._policy.steepness
        if math.isclose(steepness, 1.0):
            return x
        return (steepness**x - 1) / (steepness - 1)


def _sanitize_income(income: float | None) -> float:
    if income is None:
        return 0.0
    if not math.isfinite(income) or income < 0:
        logger.warning("Ignoring invalid income value %r", income)
        return 0.0
    return float(income)

"""Editable state for one family's contract in one school year."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from schoolhouse.calculator import assistance_amount, decisions_changed, round_dollars
from schoolhouse.exceptions import ContractStateError
from schoolhouse.formatting import monthly_payments
from schoolhouse.models.contract import Contract, Enrollment
from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.tuition import PriorContract, TuitionQuote, TuitionRequest

if TYPE_CHECKING:
    from schoolhouse.calculator import TuitionCalculator
    from schoolhouse.models.family import Family
    from schoolhouse.models.year import Year

TUITION_STEP = 50
SLIDER_MINIMUM = 500


class ContractEditor:
    """Tracks the choices a family or administrator makes on a contract.

    Every derived figure is recomputed from the calculator when asked
    for; the editor only stores what the user entered.

    Parameters
    ----------
    calculator
        Tuition calculator used for quotes.
    year
        The school year being contracted.
    family
        The family the contract belongs to.
    contract
        The saved contract, or a fresh unsaved one.
    previous_contract
        Last year's contract, if any.
    enrollments
        The family's existing enrollments for *year*.
    """

    def __init__(
        self,
        calculator: TuitionCalculator,
        year: Year,
        family: Family,
        contract: Contract,
        previous_contract: Contract | None = None,
        enrollments: list[Enrollment] | None = None,
    ) -> None:
        self._calculator = calculator
        self.year = year
        self.family = family
        self.contract = contract
        self.previous_contract = previous_contract
        self.enrollments = list(enrollments or [])

        self.decisions: dict[str, EnrollmentDecision] = dict(contract.student_decisions)
        self.tuition = contract.tuition
        self.assistance_amount = contract.assistance_amount
        self.tuition_assistance_requested = contract.tuition_assistance_requested
        self.tuition_assistance_granted = contract.tuition_assistance_granted
        self.is_signed = contract.is_signed

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def all_decisions_made(self) -> bool:
        students = self.family.students
        return bool(students) and all(s.id in self.decisions for s in students)

    @property
    def decisions_changed_from_contract(self) -> bool:
        return self._differs_from(self.contract.student_decisions)

    @property
    def decisions_changed_from_previous_year(self) -> bool:
        if self.previous_contract is None:
            return True
        return self._differs_from(self.previous_contract.student_decisions)

    def quote(self) -> TuitionQuote:
        previous = None
        if self.previous_contract is not None:
            previous = PriorContract(
                tuition=self.previous_contract.tuition,
                student_decisions=self.previous_contract.student_decisions,
            )
        return self._calculator.quote(TuitionRequest(
            year=self.year,
            student_decisions=self._family_decisions(),
            gross_family_income=self.family.gross_family_income,
            previous_contract=previous,
        ))

    @property
    def slider_range(self) -> tuple[int, int]:
        q = self.quote()
        return SLIDER_MINIMUM, max(q.sliding_scale_tuition, q.suggested_tuition) * 2

    @property
    def payment_schedule(self) -> dict[int, float]:
        return monthly_payments(self.tuition)

    @property
    def needs_assistance(self) -> bool:
        """Tuition is below the minimum and no assistance has been requested."""
        return self.tuition < self.quote().min_tuition and not self.tuition_assistance_requested

    def clearable(self, is_admin: bool) -> bool:
        """Only an administrator may clear a registration with nobody attending."""
        if not is_admin:
            return False
        return not any(d.is_attending for d in self._family_decisions().values())

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_decision(self, student_id: str, decision: EnrollmentDecision) -> None:
        """Record a student's attendance and re-derive the tuition.

        Once every student has a decision the tuition resets to the
        suggestion if attendance differs from the saved contract, or back
        to the saved tuition if it does not.
        """
        if not any(s.id == student_id for s in self.family.students):
            msg = f"Student '{student_id}' is not in family '{self.family.id}'"
            raise ContractStateError(msg)
        self.decisions[student_id] = EnrollmentDecision(decision)
        self.reset_tuition()

    def reset_tuition(self) -> None:
        """Re-derive the tuition from the current decisions.

        Does nothing until every student has a decision.
        """
        if not self.all_decisions_made:
            return
        if self.decisions_changed_from_contract:
            self.set_tuition(self.quote().suggested_tuition)
        elif self.contract.tuition:
            self.set_tuition(self.contract.tuition)

    def set_tuition(self, amount: float) -> None:
        """Set the chosen tuition and recompute the assistance gap."""
        self.tuition = max(0.0, float(amount))
        min_tuition = self.quote().min_tuition
        self.assistance_amount = assistance_amount(self.tuition, min_tuition)
        if self.tuition >= min_tuition:
            self.tuition_assistance_requested = False
            self.tuition_assistance_granted = False

    def increment_tuition(self) -> None:
        self.set_tuition(self._snapped_tuition() + TUITION_STEP)

    def decrement_tuition(self) -> None:
        self.set_tuition(max(0, self._snapped_tuition() - TUITION_STEP))

    def set_assistance_requested(self, requested: bool) -> None:
        self.tuition_assistance_requested = requested
        if not requested:
            self.tuition_assistance_granted = False

    def set_assistance_granted(self, granted: bool) -> None:
        if granted and not self.tuition_assistance_requested:
            msg = "Tuition assistance cannot be granted before it is requested"
            raise ContractStateError(msg)
        self.tuition_assistance_granted = granted

    def set_signed(self, signed: bool) -> None:
        self.is_signed = signed

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def build_contract(self, saved_by: str | None) -> Contract:
        """The contract as it should be saved.

        Raises
        ------
        ContractStateError
            If a student has no attendance decision.
        """
        if not self.all_decisions_made:
            msg = "Every student needs an attendance decision before saving"
            raise ContractStateError(msg)
        q = self.quote()
        return self.contract.model_copy(deep=True, update={
            "family_name": self.family.name,
            "student_decisions": self._family_decisions(),
            "tuition": self.tuition,
            "assistance_amount": self.assistance_amount,
            "tuition_assistance_requested": self.tuition_assistance_requested,
            "tuition_assistance_granted": self.tuition_assistance_granted,
            "is_signed": self.is_signed,
            "suggested_tuition": q.suggested_tuition,
            "min_tuition": q.min_tuition,
            "last_saved_by": saved_by or "unknown",
            "last_saved_at": datetime.now(UTC),
        })

    def enrollment_changes(self) -> tuple[list[Enrollment], list[str]]:
        """Enrollments to upsert and student IDs whose enrollment to delete."""
        existing = {e.student_id for e in self.enrollments}
        to_save: list[Enrollment] = []
        to_delete: list[str] = []
        for student in self.family.students:
            decision = self.decisions.get(student.id)
            if decision is not None and decision.is_attending:
                to_save.append(Enrollment(
                    id=student.id,
                    year_id=self.year.id,
                    family_id=self.family.id,
                    family_name=self.family.name,
                    student_id=student.id,
                    student_name=student.display_name,
                    enrollment_type=decision,
                ))
            elif student.id in existing:
                to_delete.append(student.id)
        return to_save, to_delete

    def _family_decisions(self) -> dict[str, EnrollmentDecision]:
        return {
            s.id: self.decisions[s.id]
            for s in self.family.students
            if s.id in self.decisions
        }

    def _differs_from(self, other: dict[str, EnrollmentDecision]) -> bool:
        return decisions_changed(self._family_decisions(), other)

    def _snapped_tuition(self) -> int:
        return round_dollars(self.tuition / TUITION_STEP) * TUITION_STEP

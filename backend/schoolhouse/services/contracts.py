"""Contract service: loads, saves, clears and signs enrollment contracts."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from schoolhouse.exceptions import ContractStateError, RecordNotFoundError
from schoolhouse.models.contract import Contract, SignatureData
from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.tuition import PriorContract, TuitionRequest
from schoolhouse.services.contract_editor import ContractEditor

if TYPE_CHECKING:
    from schoolhouse.calculator import TuitionCalculator
    from schoolhouse.data.repository import SchoolRepository
    from schoolhouse.models.tuition import TuitionQuote

logger = logging.getLogger(__name__)


class ContractService:
    """Coordinates the repository and the calculator for contract workflows."""

    def __init__(
        self,
        repository: SchoolRepository,
        calculator: TuitionCalculator,
    ) -> None:
        self._repository = repository
        self._calculator = calculator

    def open_editor(self, year_id: str, family_id: str) -> ContractEditor:
        """Load everything needed to edit a family's contract for a year.

        A family without a contract gets a fresh one whose decisions come
        from any existing enrollments, defaulting to Not Attending, and whose
        tuition starts at the suggestion for those decisions.

        Raises
        ------
        RecordNotFoundError
            If the year or the family does not exist.
        """
        year = self._repository.require_year(year_id)
        family = self._repository.require_family(family_id)
        enrollments = self._repository.list_enrollments(year_id, family_id)

        contract = self._repository.get_contract(year_id, family_id)
        initial_decisions: dict[str, EnrollmentDecision] | None = None
        if contract is None:
            enrolled = {e.student_id: e.enrollment_type for e in enrollments}
            contract = Contract(id=family_id, year_id=year_id, family_id=family_id)
            initial_decisions = {
                s.id: enrolled.get(s.id, EnrollmentDecision.NOT_ATTENDING)
                for s in family.students
            }

        editor = ContractEditor(
            self._calculator,
            year,
            family,
            contract,
            previous_contract=self._repository.previous_year_contract(year_id, family_id),
            enrollments=enrollments,
        )
        if initial_decisions is not None:
            editor.decisions = initial_decisions
            editor.reset_tuition()
        return editor

    def save(self, editor: ContractEditor, saved_by: str | None) -> Contract:
        """Persist the edited contract, then bring enrollments in line with it."""
        contract = self._repository.save_contract(editor.build_contract(saved_by))

        to_save, to_delete = editor.enrollment_changes()
        for enrollment in to_save:
            self._repository.save_enrollment(enrollment)
        for student_id in to_delete:
            self._repository.delete_enrollment(contract.year_id, student_id)

        logger.info(
            "Saved contract for family %s in year %s: tuition %.0f (%d attending)",
            contract.family_id,
            contract.year_id,
            contract.tuition,
            contract.student_count,
        )
        return contract

    def clear_registration(self, editor: ContractEditor, is_admin: bool) -> None:
        """Delete the contract and every enrollment for the family and year.

        Raises
        ------
        ContractStateError
            If the caller is not an administrator or a student is attending.
        """
        if not editor.clearable(is_admin):
            msg = "Only an administrator can clear a registration with no students attending"
            raise ContractStateError(msg)
        year_id = editor.year.id
        self._repository.delete_contract(year_id, editor.family.id)
        for student in editor.family.students:
            self._repository.delete_enrollment(year_id, student.id)
        logger.info("Cleared registration for family %s in year %s", editor.family.id, year_id)

    def save_signatures(
        self,
        year_id: str,
        family_id: str,
        signatures: dict[str, str],
    ) -> Contract:
        """Record guardian signatures on a saved contract.

        *signatures* maps guardian IDs to base64 signature images. An empty
        image removes that guardian's signature; guardians not mentioned are
        left as they are.

        Raises
        ------
        RecordNotFoundError
            If the family or the contract does not exist.
        ContractStateError
            If a signature is for someone who is not a guardian of the family.
        """
        family = self._repository.require_family(family_id)
        contract = self._repository.get_contract(year_id, family_id)
        if contract is None:
            msg = f"No contract for family '{family_id}' in year '{year_id}'"
            raise RecordNotFoundError(msg)

        now = datetime.now(UTC)
        updated = dict(contract.signatures)
        for guardian_id, data in signatures.items():
            if family.guardian(guardian_id) is None:
                msg = f"'{guardian_id}' is not a guardian of family '{family_id}'"
                raise ContractStateError(msg)
            if data:
                updated[guardian_id] = SignatureData(data=data, date=now, guardian_id=guardian_id)
            else:
                updated.pop(guardian_id, None)

        contract.signatures = updated
        logger.info(
            "Saved %d signature(s) for family %s in year %s",
            len(updated),
            family_id,
            year_id,
        )
        return self._repository.save_contract(contract)

    def quote(
        self,
        year_id: str,
        family_id: str,
        decisions: dict[str, EnrollmentDecision] | None = None,
    ) -> TuitionQuote:
        """Quote a family's tuition for *decisions*, or their saved decisions."""
        year = self._repository.require_year(year_id)
        family = self._repository.require_family(family_id)
        if decisions is None:
            saved = self._repository.get_contract(year_id, family_id)
            decisions = saved.student_decisions if saved else {}
        previous = self._repository.previous_year_contract(year_id, family_id)
        return self._calculator.quote(TuitionRequest(
            year=year,
            student_decisions=decisions,
            gross_family_income=family.gross_family_income,
            previous_contract=(
                PriorContract(
                    tuition=previous.tuition,
                    student_decisions=previous.student_decisions,
                )
                if previous
                else None
            ),
        ))

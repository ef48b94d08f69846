"""School record repository: years, families, contracts and enrollments."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from schoolhouse.exceptions import RecordNotFoundError, YearConfigurationError
from schoolhouse.models.contract import ContractDisplayRow
from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.year import Year

if TYPE_CHECKING:
    from schoolhouse.models.contract import Contract, Enrollment
    from schoolhouse.models.family import Family
    from schoolhouse.models.year import YearInput

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for the portal's school records.

    Wraps in-memory document collections. Contracts and enrollments are
    nested under their year, keyed by family ID and student ID respectively,
    so a family can never hold two contracts for the same year.
    Records are copied on the way in and out; callers never share state
    with the store.
    """

    def __init__(
        self,
        years: list[Year] | None = None,
        families: list[Family] | None = None,
    ) -> None:
        self._years: dict[str, Year] = {y.id: y.model_copy() for y in years or []}
        self._families: dict[str, Family] = {
            f.id: f.model_copy(deep=True) for f in families or []
        }
        self._contracts: dict[str, dict[str, Contract]] = {}
        self._enrollments: dict[str, dict[str, Enrollment]] = {}

    # ------------------------------------------------------------------
    # Years
    # ------------------------------------------------------------------

    def list_years(self) -> list[Year]:
        """All years, newest name first."""
        return sorted(
            (y.model_copy() for y in self._years.values()),
            key=lambda y: y.name,
            reverse=True,
        )

    def get_year(self, year_id: str) -> Year | None:
        year = self._years.get(year_id)
        return year.model_copy() if year else None

    def require_year(self, year_id: str) -> Year:
        year = self.get_year(year_id)
        if year is None:
            msg = f"Year '{year_id}' not found"
            raise RecordNotFoundError(msg)
        return year

    def create_year(self, data: YearInput) -> Year:
        """Create a year from administrator input and assign it an ID.

        Raises
        ------
        YearConfigurationError
            If the income or tuition bounds are inverted.
        """
        year = _build_year(uuid.uuid4().hex, data)
        self._years[year.id] = year
        logger.info("Created year %s (%s)", year.name, year.id)
        return year.model_copy()

    def update_year(self, year_id: str, data: YearInput) -> Year:
        self.require_year(year_id)
        year = _build_year(year_id, data)
        self._years[year_id] = year
        logger.info("Updated year %s (%s)", year.name, year_id)
        return year.model_copy()

    def previous_year_id(self, year_id: str) -> str | None:
        """ID of the year whose name sorts immediately before *year_id*'s."""
        year = self.require_year(year_id)
        earlier = [y for y in self._years.values() if y.name < year.name]
        if not earlier:
            return None
        return max(earlier, key=lambda y: y.name).id

    # ------------------------------------------------------------------
    # Families
    # ------------------------------------------------------------------

    def list_families(self) -> list[Family]:
        return sorted(
            (f.model_copy(deep=True) for f in self._families.values()),
            key=lambda f: f.name,
        )

    def get_family(self, family_id: str) -> Family | None:
        family = self._families.get(family_id)
        return family.model_copy(deep=True) if family else None

    def require_family(self, family_id: str) -> Family:
        family = self.get_family(family_id)
        if family is None:
            msg = f"Family '{family_id}' not found"
            raise RecordNotFoundError(msg)
        return family

    def save_family(self, family: Family) -> Family:
        self._families[family.id] = family.model_copy(deep=True)
        return family

    def delete_family(self, family_id: str) -> None:
        if self._families.pop(family_id, None) is None:
            msg = f"Family '{family_id}' not found"
            raise RecordNotFoundError(msg)

    def families_with_ids(self, family_ids: list[str]) -> list[Family]:
        return [
            f.model_copy(deep=True)
            for fid in dict.fromkeys(family_ids)
            if (f := self._families.get(fid)) is not None
        ]

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def list_contracts(self, year_id: str) -> list[Contract]:
        return [
            c.model_copy(deep=True)
            for c in self._contracts.get(year_id, {}).values()
        ]

    def get_contract(self, year_id: str, family_id: str) -> Contract | None:
        contract = self._contracts.get(year_id, {}).get(family_id)
        return contract.model_copy(deep=True) if contract else None

    def save_contract(self, contract: Contract) -> Contract:
        """Insert or replace the contract for (year, family)."""
        stored = contract.model_copy(deep=True, update={"id": contract.family_id})
        self._contracts.setdefault(contract.year_id, {})[contract.family_id] = stored
        return stored.model_copy(deep=True)

    def delete_contract(self, year_id: str, family_id: str) -> None:
        self._contracts.get(year_id, {}).pop(family_id, None)

    def previous_year_contract(self, year_id: str, family_id: str) -> Contract | None:
        previous_id = self.previous_year_id(year_id)
        if previous_id is None:
            logger.debug("No previous year found for year %s", year_id)
            return None
        return self.get_contract(previous_id, family_id)

    # ------------------------------------------------------------------
    # Enrollments
    # ------------------------------------------------------------------

    def list_enrollments(
        self, year_id: str, family_id: str | None = None
    ) -> list[Enrollment]:
        return [
            e.model_copy()
            for e in self._enrollments.get(year_id, {}).values()
            if family_id is None or e.family_id == family_id
        ]

    def save_enrollment(self, enrollment: Enrollment) -> Enrollment:
        self._enrollments.setdefault(enrollment.year_id, {})[enrollment.student_id] = (
            enrollment.model_copy(update={"id": enrollment.student_id})
        )
        return enrollment

    def delete_enrollment(self, year_id: str, student_id: str) -> None:
        self._enrollments.get(year_id, {}).pop(student_id, None)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def enrolled_families(self, year_id: str) -> list[Family]:
        """Families with at least one student attending *year_id*."""
        family_ids = [
            c.family_id
            for c in self._contracts.get(year_id, {}).values()
            if c.student_count > 0
        ]
        return self.families_with_ids(family_ids)

    def contracts_for_display(self, year_id: str) -> list[ContractDisplayRow]:
        """Contracts for *year_id* with family and student names attached."""
        enrollments = self.list_enrollments(year_id)
        rows: list[ContractDisplayRow] = []
        for contract in self.list_contracts(year_id):
            family = self._families.get(contract.family_id)
            family_enrollments = [e for e in enrollments if e.family_id == contract.family_id]
            calculated = family.calculated_name if family else ""
            guardians = family.guardian_names if family else ""
            rows.append(ContractDisplayRow(
                contract=contract,
                family_name=calculated or contract.family_name,
                family_name_and_guardians=f"{calculated} ({guardians})",
                full_time_names=_names_with_type(
                    family_enrollments, EnrollmentDecision.FULL_TIME
                ),
                part_time_names=_names_with_type(
                    family_enrollments, EnrollmentDecision.PART_TIME
                ),
            ))
        return sorted(rows, key=lambda r: r.family_name)


def _build_year(year_id: str, data: YearInput) -> Year:
    try:
        return Year(id=year_id, **data.model_dump())
    except ValueError as exc:
        msg = f"Invalid configuration for year '{data.name}': {exc}"
        raise YearConfigurationError(msg) from exc


def _names_with_type(enrollments: list[Enrollment], kind: EnrollmentDecision) -> str:
    return ", ".join(e.student_name for e in enrollments if e.enrollment_type == kind)

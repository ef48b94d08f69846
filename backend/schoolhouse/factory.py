"""Factory functions for creating pre-configured Schoolhouse components."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schoolhouse.calculator import TuitionCalculator
from schoolhouse.data.repository import SchoolRepository
from schoolhouse.data.seed import SEED_FAMILIES, SEED_YEARS
from schoolhouse.services.contracts import ContractService

if TYPE_CHECKING:
    from schoolhouse.models.year import TuitionPolicy


def create_default_calculator(policy: TuitionPolicy | None = None) -> TuitionCalculator:
    """Create a TuitionCalculator with *policy*, or the default policy.

    Example::

        from schoolhouse import create_default_calculator

        calculator = create_default_calculator()
        quote = calculator.quote(request)
    """
    return TuitionCalculator(policy)


def create_seeded_repository() -> SchoolRepository:
    """Create a SchoolRepository holding the built-in sample years and families."""
    return SchoolRepository(years=SEED_YEARS, families=SEED_FAMILIES)


def create_contract_service(
    repository: SchoolRepository | None = None,
    calculator: TuitionCalculator | None = None,
) -> ContractService:
    """Wire a ContractService, filling in seeded defaults for missing parts."""
    return ContractService(
        repository=repository or create_seeded_repository(),
        calculator=calculator or create_default_calculator(),
    )

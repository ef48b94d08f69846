"""Schoolhouse sliding-scale tuition and enrollment contracts.

Usage::

    from schoolhouse import TuitionCalculator, TuitionRequest, Year

    calculator = TuitionCalculator()
    quote = calculator.quote(TuitionRequest(year=year, gross_family_income=60_000,
                                            student_decisions=decisions))
"""

from schoolhouse.calculator import TuitionCalculator
from schoolhouse.data.repository import SchoolRepository
from schoolhouse.factory import (
    create_contract_service,
    create_default_calculator,
    create_seeded_repository,
)
from schoolhouse.models.contract import Contract, Enrollment, SignatureData
from schoolhouse.models.enums import EnrollmentDecision
from schoolhouse.models.family import Family, Guardian, Student
from schoolhouse.models.tuition import (
    PriorContract,
    TuitionOptions,
    TuitionQuote,
    TuitionRequest,
)
from schoolhouse.models.year import TuitionPolicy, Year
from schoolhouse.services.contract_editor import ContractEditor
from schoolhouse.services.contracts import ContractService

__all__ = [
    "Contract",
    "ContractEditor",
    "ContractService",
    "Enrollment",
    "EnrollmentDecision",
    "Family",
    "Guardian",
    "PriorContract",
    "SchoolRepository",
    "SignatureData",
    "Student",
    "TuitionCalculator",
    "TuitionOptions",
    "TuitionPolicy",
    "TuitionQuote",
    "TuitionRequest",
    "Year",
    "create_contract_service",
    "create_default_calculator",
    "create_seeded_repository",
]

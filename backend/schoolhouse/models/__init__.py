"""Domain models for Schoolhouse."""

from schoolhouse.models.contract import (
    Contract,
    ContractDisplayRow,
    Enrollment,
    SignatureData,
)
from schoolhouse.models.enums import EnrollmentDecision, UserRole
from schoolhouse.models.family import (
    EmergencyContact,
    Family,
    Guardian,
    MedicalProvider,
    Student,
)
from schoolhouse.models.tuition import (
    PriorContract,
    SlidingScaleRow,
    TuitionOptions,
    TuitionQuote,
    TuitionRequest,
)
from schoolhouse.models.year import TuitionPolicy, Year, YearInput

__all__ = [
    "Contract",
    "ContractDisplayRow",
    "EmergencyContact",
    "Enrollment",
    "EnrollmentDecision",
    "Family",
    "Guardian",
    "MedicalProvider",
    "PriorContract",
    "SignatureData",
    "SlidingScaleRow",
    "Student",
    "TuitionOptions",
    "TuitionPolicy",
    "TuitionQuote",
    "TuitionRequest",
    "UserRole",
    "Year",
    "YearInput",
]

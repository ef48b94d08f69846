"""Record storage for Schoolhouse."""

from schoolhouse.data.repository import SchoolRepository
from schoolhouse.data.seed import SEED_FAMILIES, SEED_YEARS

__all__ = [
    "SEED_FAMILIES",
    "SEED_YEARS",
    "SchoolRepository",
]

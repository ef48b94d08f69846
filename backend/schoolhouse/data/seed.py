"""Seed records for a freshly started portal.

Two consecutive school years using the default sliding-scale bounds and a
pair of sample families, enough to exercise every screen without a
database.
"""

from schoolhouse.models.family import Family, Guardian, Student
from schoolhouse.models.year import Year

SEED_YEARS: list[Year] = [
    Year(
        id="2024-2025",
        name="2024-2025",
        minimum_income=28_000.0,
        maximum_income=120_000.0,
        minimum_tuition=1_000.0,
        maximum_tuition=12_500.0,
    ),
    Year(
        id="2025-2026",
        name="2025-2026",
        minimum_income=28_000.0,
        maximum_income=120_000.0,
        minimum_tuition=1_000.0,
        maximum_tuition=12_500.0,
        is_accepting_registrations=True,
    ),
]

SEED_FAMILIES: list[Family] = [
    Family(
        id="rivera",
        name="Rivera Family",
        city="Albany",
        state="NY",
        gross_family_income=74_000.0,
        guardians=[
            Guardian(id="g-ana", first_name="Ana", last_name="Rivera",
                     email="ana@example.org"),
            Guardian(id="g-luis", first_name="Luis", last_name="Rivera",
                     email="luis@example.org"),
        ],
        students=[
            Student(id="s-mia", first_name="Mia", last_name="Rivera", grade="3"),
            Student(id="s-theo", first_name="Theodore", preferred_name="Theo",
                    last_name="Rivera", grade="6"),
        ],
    ),
    Family(
        id="okafor",
        name="Okafor Family",
        city="Albany",
        state="NY",
        gross_family_income=None,
        guardians=[
            Guardian(id="g-ngozi", first_name="Ngozi", last_name="Okafor",
                     email="ngozi@example.org"),
        ],
        students=[
            Student(id="s-ada", first_name="Ada", last_name="Okafor", grade="K"),
        ],
    ),
]

"""Tests for the public API surface of the schoolhouse package.

Verifies that consumers can import everything they need from the top-level
``schoolhouse`` package, use the factory helpers for quick setup, and
round-trip quotes through JSON serialization.
"""

from __future__ import annotations

import json

from schoolhouse import (
    ContractService,
    EnrollmentDecision,
    SchoolRepository,
    TuitionCalculator,
    TuitionQuote,
    TuitionRequest,
    Year,
    create_contract_service,
    create_default_calculator,
    create_seeded_repository,
)


def _sample_request() -> TuitionRequest:
    return TuitionRequest(
        year=Year(id="2025-2026", name="2025-2026"),
        gross_family_income=74_000,
        student_decisions={
            "a": EnrollmentDecision.FULL_TIME,
            "b": EnrollmentDecision.PART_TIME,
        },
    )


class TestFactories:
    def test_default_calculator(self) -> None:
        calculator = create_default_calculator()
        assert isinstance(calculator, TuitionCalculator)
        assert calculator.policy.sibling_factor == 0.5

    def test_seeded_repository(self) -> None:
        repo = create_seeded_repository()
        assert isinstance(repo, SchoolRepository)
        assert [y.name for y in repo.list_years()] == ["2025-2026", "2024-2025"]
        assert repo.require_family("rivera").gross_family_income == 74_000

    def test_seeded_repositories_are_independent(self) -> None:
        first = create_seeded_repository()
        first.delete_family("rivera")
        assert create_seeded_repository().get_family("rivera") is not None

    def test_contract_service(self) -> None:
        assert isinstance(create_contract_service(), ContractService)


class TestQuoteRoundTrip:
    def test_quote_serializes(self) -> None:
        quote = create_default_calculator().quote(_sample_request())
        # 6750 full time plus 6750 * 0.625 part time
        assert quote.suggested_tuition == 10_969
        data = json.loads(quote.model_dump_json())
        assert data["suggested_tuition"] == 10_969
        assert data["year_over_year_band"] is None
        assert TuitionQuote.model_validate(data) == quote

"""Tests for the FastAPI application, run against a seeded in-memory repository."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from schoolhouse.api.app import create_app
from schoolhouse.calculator import TuitionCalculator
from schoolhouse.exceptions import ContractPdfError
from schoolhouse.factory import create_seeded_repository

# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

YEAR = "2025-2026"
CONTRACT_URL = f"/api/years/{YEAR}/contracts/rivera"
ADMIN = {"x-user-role": "admin", "x-user-email": "office@example.org"}
PARENT = {"x-user-role": "parent", "x-user-email": "ana@example.org"}


def _create_test_client() -> TestClient:
    app = create_app(
        repository=create_seeded_repository(),
        calculator=TuitionCalculator(),
    )
    return TestClient(app)


def _save_rivera(client: TestClient, mia: str = "Full Time") -> dict:
    response = client.put(
        CONTRACT_URL,
        json={"student_decisions": {"s-mia": mia, "s-theo": "Not Attending"}},
        headers=PARENT,
    )
    assert response.status_code == 200
    return response.json()


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health_returns_200(self) -> None:
        client = _create_test_client()
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"
        assert data["calculator_version"] == "0.1.0"


# ---------------------------------------------------------------------------
# Years
# ---------------------------------------------------------------------------


class TestYears:
    def test_list_years(self) -> None:
        response = _create_test_client().get("/api/years")
        assert response.status_code == 200
        assert [y["name"] for y in response.json()] == ["2025-2026", "2024-2025"]

    def test_create_year(self) -> None:
        client = _create_test_client()
        response = client.post("/api/years", json={"name": "2026-2027"})
        assert response.status_code == 201
        year_id = response.json()["id"]
        assert client.get(f"/api/years/{year_id}").json()["name"] == "2026-2027"

    def test_inverted_bounds_return_422(self) -> None:
        response = _create_test_client().post(
            "/api/years",
            json={"name": "2026-2027", "minimum_income": 150_000},
        )
        assert response.status_code == 422
        assert "minimum_income" in response.json()["detail"]

    def test_update_year(self) -> None:
        response = _create_test_client().put(
            f"/api/years/{YEAR}",
            json={"name": YEAR, "maximum_tuition": 15_000},
        )
        assert response.status_code == 200
        assert response.json()["maximum_tuition"] == 15_000

    def test_missing_year_returns_404(self) -> None:
        assert _create_test_client().get("/api/years/1999-2000").status_code == 404

    def test_sliding_scale(self) -> None:
        response = _create_test_client().get(f"/api/years/{YEAR}/sliding-scale")
        assert response.status_code == 200
        rows = response.json()
        assert rows[0]["income"] == 10_000
        assert rows[-1]["income"] == 240_000
        assert len(rows) == 47


# ---------------------------------------------------------------------------
# Quote endpoint
# ---------------------------------------------------------------------------


class TestQuote:
    def test_quote(self) -> None:
        response = _create_test_client().post(
            "/api/tuition/quote",
            json={
                "year": {
                    "id": "y",
                    "name": "2025-2026",
                    "minimum_income": 20_000,
                    "maximum_income": 100_000,
                    "minimum_tuition": 2_000,
                    "maximum_tuition": 10_000,
                },
                "gross_family_income": 60_000,
                "student_decisions": {"s1": "Full Time"},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["suggested_tuition"] == 6_000
        assert data["min_tuition"] == 6_000

    def test_invalid_decision_returns_422(self) -> None:
        response = _create_test_client().post(
            "/api/tuition/quote",
            json={"year": {"id": "y", "name": "y"}, "student_decisions": {"s1": "Sometimes"}},
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------


class TestFamilies:
    def test_list_and_get(self) -> None:
        client = _create_test_client()
        assert len(client.get("/api/families").json()) == 2
        family = client.get("/api/families/rivera").json()
        assert family["gross_family_income"] == 74_000

    def test_save_family(self) -> None:
        client = _create_test_client()
        response = client.post("/api/families", json={"id": "new", "name": "New Family"})
        assert response.status_code == 201
        assert client.get("/api/families/new").status_code == 200

    def test_missing_family_returns_404(self) -> None:
        assert _create_test_client().get("/api/families/nobody").status_code == 404


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class TestContracts:
    def test_open_new_contract(self) -> None:
        response = _create_test_client().get(CONTRACT_URL, headers=PARENT)
        assert response.status_code == 200
        data = response.json()
        assert data["student_decisions"] == {
            "s-mia": "Not Attending",
            "s-theo": "Not Attending",
        }
        assert data["tuition"] == 0
        assert data["clearable"] is False
        assert data["previous_year_tuition"] is None

    def test_admin_may_clear_empty_registration(self) -> None:
        data = _create_test_client().get(CONTRACT_URL, headers=ADMIN).json()
        assert data["clearable"] is True

    def test_save_contract(self) -> None:
        client = _create_test_client()
        saved = _save_rivera(client)
        assert saved["tuition"] == 6_750
        assert saved["last_saved_by"] == "ana@example.org"

        state = client.get(CONTRACT_URL, headers=PARENT).json()
        assert state["quote"]["suggested_tuition"] == 6_750
        assert state["slider_range"] == [500, 13_500]
        assert state["payment_schedule"] == {"10": 675.0, "12": 562.5}

    def test_contract_list(self) -> None:
        client = _create_test_client()
        _save_rivera(client)
        rows = client.get(f"/api/years/{YEAR}/contracts").json()
        assert len(rows) == 1
        assert rows[0]["family_name"] == "Rivera Family"
        assert rows[0]["full_time_names"] == "Mia"

    def test_parent_cannot_mark_signed(self) -> None:
        response = _create_test_client().put(
            CONTRACT_URL, json={"is_signed": True}, headers=PARENT
        )
        assert response.status_code == 403

    def test_admin_grants_assistance(self) -> None:
        response = _create_test_client().put(
            CONTRACT_URL,
            json={
                "student_decisions": {"s-mia": "Full Time", "s-theo": "Not Attending"},
                "tuition": 5_000,
                "tuition_assistance_requested": True,
                "tuition_assistance_granted": True,
            },
            headers=ADMIN,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["assistance_amount"] == 1_750
        assert data["tuition_assistance_granted"] is True

    def test_withdrawing_request_clears_grant(self) -> None:
        client = _create_test_client()
        response = client.put(
            CONTRACT_URL,
            json={
                "student_decisions": {"s-mia": "Full Time", "s-theo": "Not Attending"},
                "tuition": 3_000,
                "tuition_assistance_requested": True,
                "tuition_assistance_granted": True,
            },
            headers=ADMIN,
        )
        assert response.json()["tuition_assistance_granted"] is True

        response = client.put(
            CONTRACT_URL,
            json={"tuition_assistance_requested": False},
            headers=PARENT,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tuition_assistance_requested"] is False
        assert data["tuition_assistance_granted"] is False
        assert data["tuition"] == 3_000

    def test_omitted_request_flag_is_left_alone(self) -> None:
        client = _create_test_client()
        client.put(
            CONTRACT_URL,
            json={
                "student_decisions": {"s-mia": "Full Time", "s-theo": "Not Attending"},
                "tuition": 3_000,
                "tuition_assistance_requested": True,
            },
            headers=PARENT,
        )
        response = client.put(CONTRACT_URL, json={}, headers=PARENT)
        assert response.json()["tuition_assistance_requested"] is True

    def test_grant_without_request_returns_400(self) -> None:
        response = _create_test_client().put(
            CONTRACT_URL,
            json={"tuition_assistance_granted": True},
            headers=ADMIN,
        )
        assert response.status_code == 400

    def test_unknown_student_returns_400(self) -> None:
        response = _create_test_client().put(
            CONTRACT_URL,
            json={"student_decisions": {"s-ada": "Full Time"}},
            headers=PARENT,
        )
        assert response.status_code == 400

    def test_negative_tuition_returns_422(self) -> None:
        response = _create_test_client().put(
            CONTRACT_URL, json={"tuition": -10}, headers=PARENT
        )
        assert response.status_code == 422

    def test_missing_family_returns_404(self) -> None:
        response = _create_test_client().get(
            f"/api/years/{YEAR}/contracts/nobody", headers=PARENT
        )
        assert response.status_code == 404

    def test_clear_registration(self) -> None:
        client = _create_test_client()
        _save_rivera(client, mia="Not Attending")
        assert client.delete(CONTRACT_URL, headers=PARENT).status_code == 400

        response = client.delete(CONTRACT_URL, headers=ADMIN)
        assert response.status_code == 200
        assert response.json() == {"status": "cleared"}
        assert client.get(f"/api/years/{YEAR}/contracts").json() == []


# ---------------------------------------------------------------------------
# Signatures and PDF
# ---------------------------------------------------------------------------


class TestSignatures:
    def test_sign_contract(self) -> None:
        client = _create_test_client()
        _save_rivera(client)
        response = client.put(
            f"{CONTRACT_URL}/signatures", json={"signatures": {"g-ana": "aGVsbG8="}}
        )
        assert response.status_code == 200
        assert list(response.json()["signatures"]) == ["g-ana"]

    def test_non_guardian_returns_400(self) -> None:
        client = _create_test_client()
        _save_rivera(client)
        response = client.put(
            f"{CONTRACT_URL}/signatures", json={"signatures": {"g-ngozi": "aGVsbG8="}}
        )
        assert response.status_code == 400

    def test_no_contract_returns_404(self) -> None:
        response = _create_test_client().put(
            f"{CONTRACT_URL}/signatures", json={"signatures": {"g-ana": "aGVsbG8="}}
        )
        assert response.status_code == 404


class TestContractPdf:
    def test_download_pdf(self) -> None:
        client = _create_test_client()
        _save_rivera(client)
        response = client.get(f"{CONTRACT_URL}/pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "Rivera Family 2025-2026 Contract.pdf" in response.headers[
            "content-disposition"
        ]
        assert response.content.startswith(b"%PDF")

    def test_no_contract_returns_404(self) -> None:
        assert _create_test_client().get(f"{CONTRACT_URL}/pdf").status_code == 404

    def test_render_error_returns_500(self) -> None:
        app = create_app(repository=create_seeded_repository())
        generator = MagicMock()
        generator.render.side_effect = ContractPdfError("render failed")
        app.state.pdf_generator = generator
        client = TestClient(app)
        _save_rivera(client)

        response = client.get(f"{CONTRACT_URL}/pdf")
        assert response.status_code == 500
        assert "render failed" in response.json()["detail"]

"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, Header, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from schoolhouse.api.deps import cors_origins, load_policy
from schoolhouse.calculator import CALCULATOR_VERSION
from schoolhouse.exceptions import (
    ContractPdfError,
    ContractStateError,
    RecordNotFoundError,
    SchoolhouseError,
    YearConfigurationError,
)
from schoolhouse.models.enums import EnrollmentDecision, UserRole
from schoolhouse.models.family import Family  # noqa: TCH001 (FastAPI resolves at runtime)
from schoolhouse.models.tuition import TuitionRequest  # noqa: TCH001
from schoolhouse.models.year import YearInput  # noqa: TCH001
from schoolhouse.services.contract_pdf import ContractPdfGenerator
from schoolhouse.services.contracts import ContractService

if TYPE_CHECKING:
    from schoolhouse.calculator import TuitionCalculator
    from schoolhouse.data.repository import SchoolRepository
    from schoolhouse.services.contract_editor import ContractEditor

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


class ContractUpdate(BaseModel):
    """Edits submitted from the contract form."""

    student_decisions: dict[str, EnrollmentDecision] = Field(default_factory=dict)
    tuition: float | None = Field(default=None, ge=0)
    tuition_assistance_requested: bool | None = None
    tuition_assistance_granted: bool | None = None
    is_signed: bool | None = None


class SignaturesUpdate(BaseModel):
    """Guardian ID -> base64 signature image; an empty image removes it."""

    signatures: dict[str, str]


def _to_http(exc: SchoolhouseError) -> HTTPException:
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, YearConfigurationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ContractStateError):
        return HTTPException(status_code=400, detail=str(exc))
    logger.exception("Unexpected error handling request")
    return HTTPException(status_code=500, detail=str(exc))


def _editor_state(editor: ContractEditor, is_admin: bool) -> dict[str, Any]:
    quote = editor.quote()
    previous = editor.previous_contract
    return {
        "contract": editor.contract.model_dump(mode="json"),
        "family_name": editor.family.name,
        "year_name": editor.year.name,
        "student_decisions": {k: v.value for k, v in editor.decisions.items()},
        "tuition": editor.tuition,
        "assistance_amount": editor.assistance_amount,
        "tuition_assistance_requested": editor.tuition_assistance_requested,
        "tuition_assistance_granted": editor.tuition_assistance_granted,
        "is_signed": editor.is_signed,
        "quote": quote.model_dump(mode="json"),
        "all_decisions_made": editor.all_decisions_made,
        "needs_assistance": editor.needs_assistance,
        "slider_range": list(editor.slider_range),
        "payment_schedule": {
            str(months): amount for months, amount in editor.payment_schedule.items()
        },
        "previous_year_tuition": (
            previous.tuition
            if previous and not editor.decisions_changed_from_previous_year
            else None
        ),
        "clearable": editor.clearable(is_admin),
    }


def create_app(
    *,
    repository: SchoolRepository | None = None,
    calculator: TuitionCalculator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    repository
        Optional pre-built repository for dependency injection (e.g. tests).
        If not provided, a repository holding the seed records is created on
        first use.
    calculator
        Optional pre-built calculator. If not provided, one is created from
        the SCHOOLHOUSE_* policy environment variables on first use.

    Authentication happens upstream; the caller's identity arrives in the
    ``X-User-Email`` and ``X-User-Role`` headers.
    """
    app = FastAPI(title="Schoolhouse", version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject their own
    app.state.repository = repository
    app.state.calculator = calculator
    app.state.pdf_generator = ContractPdfGenerator()

    def _get_repository() -> SchoolRepository:
        repo: SchoolRepository | None = app.state.repository
        if repo is not None:
            return repo
        from schoolhouse.factory import create_seeded_repository

        repo = create_seeded_repository()
        app.state.repository = repo
        return repo

    def _get_calculator() -> TuitionCalculator:
        calc: TuitionCalculator | None = app.state.calculator
        if calc is not None:
            return calc
        from schoolhouse.factory import create_default_calculator

        calc = create_default_calculator(load_policy())
        app.state.calculator = calc
        return calc

    def _get_service() -> ContractService:
        return ContractService(_get_repository(), _get_calculator())

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {
            "status": "ok",
            "version": API_VERSION,
            "calculator_version": CALCULATOR_VERSION,
        }

    # ------------------------------------------------------------------
    # Years
    # ------------------------------------------------------------------

    @app.get("/api/years")
    def list_years() -> list[dict[str, Any]]:
        return [y.model_dump(mode="json") for y in _get_repository().list_years()]

    @app.post("/api/years", status_code=201)
    def create_year(data: YearInput) -> dict[str, Any]:
        try:
            year = _get_repository().create_year(data)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return year.model_dump(mode="json")

    @app.get("/api/years/{year_id}")
    def get_year(year_id: str) -> dict[str, Any]:
        try:
            return _get_repository().require_year(year_id).model_dump(mode="json")
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc

    @app.put("/api/years/{year_id}")
    def update_year(year_id: str, data: YearInput) -> dict[str, Any]:
        try:
            year = _get_repository().update_year(year_id, data)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return year.model_dump(mode="json")

    @app.get("/api/years/{year_id}/sliding-scale")
    def sliding_scale(year_id: str) -> list[dict[str, Any]]:
        try:
            year = _get_repository().require_year(year_id)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return [row.model_dump() for row in _get_calculator().sliding_scale(year)]

    # ------------------------------------------------------------------
    # POST /api/tuition/quote
    # ------------------------------------------------------------------

    @app.post("/api/tuition/quote")
    def quote(request: TuitionRequest) -> dict[str, Any]:
        return _get_calculator().quote(request).model_dump(mode="json")

    # ------------------------------------------------------------------
    # Families
    # ------------------------------------------------------------------

    @app.get("/api/families")
    def list_families() -> list[dict[str, Any]]:
        return [f.model_dump(mode="json") for f in _get_repository().list_families()]

    @app.post("/api/families", status_code=201)
    def save_family(family: Family) -> dict[str, Any]:
        return _get_repository().save_family(family).model_dump(mode="json")

    @app.get("/api/families/{family_id}")
    def get_family(family_id: str) -> dict[str, Any]:
        try:
            return _get_repository().require_family(family_id).model_dump(mode="json")
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    @app.get("/api/years/{year_id}/contracts")
    def list_contracts(year_id: str) -> list[dict[str, Any]]:
        try:
            repo = _get_repository()
            repo.require_year(year_id)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return [row.model_dump(mode="json") for row in repo.contracts_for_display(year_id)]

    @app.get("/api/years/{year_id}/contracts/{family_id}")
    def get_contract(
        year_id: str,
        family_id: str,
        x_user_role: UserRole = Header(default=UserRole.PARENT),
    ) -> dict[str, Any]:
        try:
            editor = _get_service().open_editor(year_id, family_id)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return _editor_state(editor, x_user_role == UserRole.ADMIN)

    @app.put("/api/years/{year_id}/contracts/{family_id}")
    def save_contract(
        year_id: str,
        family_id: str,
        update: ContractUpdate,
        x_user_email: str | None = Header(default=None),
        x_user_role: UserRole = Header(default=UserRole.PARENT),
    ) -> dict[str, Any]:
        is_admin = x_user_role == UserRole.ADMIN
        if not is_admin and (
            update.tuition_assistance_granted is not None or update.is_signed is not None
        ):
            raise HTTPException(
                status_code=403,
                detail="Only administrators can grant assistance or mark contracts signed.",
            )

        service = _get_service()
        try:
            editor = service.open_editor(year_id, family_id)
            for student_id, decision in update.student_decisions.items():
                editor.set_decision(student_id, decision)
            if update.tuition is not None:
                editor.set_tuition(update.tuition)
            if update.tuition_assistance_requested is not None:
                editor.set_assistance_requested(update.tuition_assistance_requested)
            if update.tuition_assistance_granted is not None:
                editor.set_assistance_granted(update.tuition_assistance_granted)
            if update.is_signed is not None:
                editor.set_signed(update.is_signed)
            contract = service.save(editor, x_user_email)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return contract.model_dump(mode="json")

    @app.delete("/api/years/{year_id}/contracts/{family_id}")
    def clear_contract(
        year_id: str,
        family_id: str,
        x_user_role: UserRole = Header(default=UserRole.PARENT),
    ) -> dict[str, str]:
        service = _get_service()
        try:
            editor = service.open_editor(year_id, family_id)
            service.clear_registration(editor, is_admin=x_user_role == UserRole.ADMIN)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return {"status": "cleared"}

    @app.put("/api/years/{year_id}/contracts/{family_id}/signatures")
    def save_signatures(
        year_id: str,
        family_id: str,
        update: SignaturesUpdate,
    ) -> dict[str, Any]:
        try:
            contract = _get_service().save_signatures(year_id, family_id, update.signatures)
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        return contract.model_dump(mode="json")

    @app.get("/api/years/{year_id}/contracts/{family_id}/pdf")
    def contract_pdf(year_id: str, family_id: str) -> Response:
        repo = _get_repository()
        try:
            year = repo.require_year(year_id)
            family = repo.require_family(family_id)
            contract = repo.get_contract(year_id, family_id)
            if contract is None:
                msg = f"No contract for family '{family_id}' in year '{year_id}'"
                raise RecordNotFoundError(msg)
            pdf_bytes = app.state.pdf_generator.render(contract, family, year)
        except ContractPdfError as exc:
            logger.exception("Contract PDF error")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except SchoolhouseError as exc:
            raise _to_http(exc) from exc
        filename = f"{family.name or family_id} {year.name} Contract.pdf"
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app

"""Contract PDF rendering: lays out an enrollment contract with PyMuPDF."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import fitz  # type: ignore[import-untyped]

from schoolhouse.exceptions import ContractPdfError
from schoolhouse.formatting import format_currency, format_monthly

if TYPE_CHECKING:
    from schoolhouse.models.contract import Contract
    from schoolhouse.models.family import Family
    from schoolhouse.models.year import Year

logger = logging.getLogger(__name__)

_PAGE_WIDTH = 612  # US Letter, in points
_PAGE_HEIGHT = 792
_MARGIN = 72
_TITLE_SIZE = 18
_HEADING_SIZE = 13
_BODY_SIZE = 11
_LINE_GAP = 6


@dataclass
class _Cursor:
    """Writes lines top to bottom, starting a new page when one fills up."""

    doc: fitz.Document
    y: float = _MARGIN
    page: fitz.Page | None = None
    pages: list[fitz.Page] = field(default_factory=list)

    def line(self, text: str, fontsize: float = _BODY_SIZE, indent: float = 0) -> None:
        if self.page is None or self.y + fontsize > _PAGE_HEIGHT - _MARGIN:
            self.page = self.doc.new_page(width=_PAGE_WIDTH, height=_PAGE_HEIGHT)
            self.pages.append(self.page)
            self.y = _MARGIN
        self.y += fontsize
        self.page.insert_text((_MARGIN + indent, self.y), text, fontsize=fontsize)
        self.y += _LINE_GAP

    def gap(self, points: float = _BODY_SIZE) -> None:
        self.y += points


class ContractPdfGenerator:
    """Renders a family's enrollment contract for a school year as a PDF."""

    def render(self, contract: Contract, family: Family, year: Year) -> bytes:
        """Return the contract as PDF bytes.

        Raises
        ------
        ContractPdfError
            If PyMuPDF fails to build the document.
        """
        try:
            doc = fitz.open()
        except Exception as exc:
            msg = "Failed to create PDF document"
            raise ContractPdfError(msg) from exc

        try:
            cursor = _Cursor(doc)
            self._write_header(cursor, family, year)
            self._write_students(cursor, contract, family)
            self._write_tuition(cursor, contract)
            self._write_signatures(cursor, contract, family)
            self._write_footers(cursor, family, year)
            return doc.tobytes()
        except Exception as exc:
            logger.exception("Contract PDF rendering failed for family %s", family.id)
            msg = f"Failed to render contract for family '{family.id}'"
            raise ContractPdfError(msg) from exc
        finally:
            doc.close()

    @staticmethod
    def _write_header(cursor: _Cursor, family: Family, year: Year) -> None:
        cursor.line(f"{year.name} Enrollment Contract", fontsize=_TITLE_SIZE)
        cursor.line(family.name or family.calculated_name, fontsize=_HEADING_SIZE)
        cursor.gap()

    @staticmethod
    def _write_students(cursor: _Cursor, contract: Contract, family: Family) -> None:
        cursor.line("Students", fontsize=_HEADING_SIZE)
        attending = [
            (s, contract.student_decisions[s.id])
            for s in family.students
            if s.id in contract.student_decisions
            and contract.student_decisions[s.id].is_attending
        ]
        if not attending:
            cursor.line("No students attending", indent=12)
        for student, decision in attending:
            name = f"{student.display_name} {student.last_name}".strip()
            cursor.line(f"{name}: {decision.value}", indent=12)
        cursor.gap()

    @staticmethod
    def _write_tuition(cursor: _Cursor, contract: Contract) -> None:
        cursor.line("Tuition", fontsize=_HEADING_SIZE)
        cursor.line(f"Total tuition: {format_currency(contract.tuition)}", indent=12)
        cursor.line(f"10-month plan: {format_monthly(contract.tuition, 10)}", indent=12)
        cursor.line(f"12-month plan: {format_monthly(contract.tuition, 12)}", indent=12)
        if contract.assistance_amount:
            status = "granted" if contract.tuition_assistance_granted else "requested"
            cursor.line(
                f"Tuition assistance ({status}): "
                f"{format_currency(contract.assistance_amount)}",
                indent=12,
            )
        cursor.gap()

    @staticmethod
    def _write_signatures(cursor: _Cursor, contract: Contract, family: Family) -> None:
        cursor.line("Signatures", fontsize=_HEADING_SIZE)
        for guardian in family.guardians:
            signature = contract.signatures.get(guardian.id)
            signed = (
                f"Signed {signature.date.strftime('%Y-%m-%d')}" if signature else "Not signed"
            )
            cursor.line(f"{guardian.full_name}: {signed}", indent=12)

    @staticmethod
    def _write_footers(cursor: _Cursor, family: Family, year: Year) -> None:
        page_count = len(cursor.pages)
        for number, page in enumerate(cursor.pages, start=1):
            page.insert_text(
                (_MARGIN, _PAGE_HEIGHT - _MARGIN / 2),
                f"{family.name} {year.name} Contract ({number}/{page_count})",
                fontsize=8,
            )

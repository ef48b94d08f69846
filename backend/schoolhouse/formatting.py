"""Formatting helpers for tuition figures.

Tuition is quoted to families in whole dollars (e.g. '$6,250'), and monthly
payments are shown for ten- and twelve-month plans.
"""

from __future__ import annotations

import math

PAYMENT_PLAN_MONTHS: tuple[int, ...] = (10, 12)


def format_currency(amount: float | None) -> str:
    """Format a dollar amount without cents, e.g. '$12,500'.

    ``None`` formats as '$0'. Negative amounts keep their sign in front of
    the dollar symbol.
    """
    if amount is None:
        return "$0"
    rounded = math.floor(abs(amount) + 0.5)
    if amount < 0 and rounded:
        return f"-${rounded:,}"
    return f"${rounded:,}"


def monthly_payments(tuition: float) -> dict[int, float]:
    """Monthly amount for each supported payment plan, keyed by months."""
    return {months: tuition / months for months in PAYMENT_PLAN_MONTHS}


def format_monthly(tuition: float, months: int) -> str:
    """Format a tuition as a per-month amount, e.g. '$625 / month'."""
    if months <= 0:
        msg = f"months must be positive, got {months}"
        raise ValueError(msg)
    return f"{format_currency(tuition / months)} / month"

# core/services/overdue.py
"""Derived loan status.

A loan is never stored as OVERDUE. It shows as OVERDUE while it is ACTIVE and
its due date has passed; every read path goes through ``project_status``.
``core.sa.repositories.filters.overdue_clause`` is the same rule in SQL.
"""
from datetime import datetime
from typing import Optional

from core.sa.models import Loan, LoanStatus, LoanDisplayStatus, as_utc, utcnow


def is_overdue(loan: Loan, now: Optional[datetime] = None) -> bool:
    now = as_utc(now) if now is not None else utcnow()
    return loan.status == LoanStatus.ACTIVE and as_utc(loan.due_date) < now


def project_status(loan: Loan, now: Optional[datetime] = None) -> LoanDisplayStatus:
    """Status to show for ``loan`` at ``now`` (default: current UTC time)."""
    if is_overdue(loan, now):
        return LoanDisplayStatus.OVERDUE
    return LoanDisplayStatus(loan.status.value)

# core/services/dashboard.py
from datetime import datetime
from typing import Dict, Optional
from sqlalchemy.orm import Session

from core.sa.models import UserStatus, LoanStatus, utcnow
from core.sa.repositories import BookRepository, UserRepository, LoanRepository


def get_dashboard_stats(session: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    """Headline counts for the front page; only ACTIVE users are counted."""
    loans = LoanRepository(session)
    return {
        "total_books": BookRepository(session).count_books(),
        "total_users": UserRepository(session).count_by_status(UserStatus.ACTIVE),
        "active_loans": loans.count_by_status(LoanStatus.ACTIVE),
        "overdue_loans": loans.count_overdue(now or utcnow()),
    }

# core/sa/repositories/filters.py
"""Query parameter objects for the list endpoints.

Each filter knows which criteria it recognizes and turns itself into
SQLAlchemy clauses with ``apply``. Anything not listed here is not a filter.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Query

from ..models import Book, User, UserStatus, Loan, LoanStatus, LoanDisplayStatus, utcnow


def _pattern(text: str) -> str:
    return f"%{text.strip()}%"


def overdue_clause(now: datetime):
    """SQL form of the overdue rule in core.services.overdue.project_status."""
    return (Loan.status == LoanStatus.ACTIVE) & (Loan.due_date < now)


@dataclass
class BookFilters:
    search: Optional[str] = None
    available: Optional[bool] = None

    def apply(self, query: Query) -> Query:
        if self.search and self.search.strip():
            pattern = _pattern(self.search)
            query = query.filter(or_(
                Book.title.ilike(pattern),
                Book.author.ilike(pattern),
                Book.genre.ilike(pattern),
            ))
        if self.available:
            query = query.filter(Book.available_copies > 0)
        return query


@dataclass
class UserFilters:
    search: Optional[str] = None
    status: Optional[UserStatus] = None

    def apply(self, query: Query) -> Query:
        if self.search and self.search.strip():
            pattern = _pattern(self.search)
            query = query.filter(or_(
                User.name.ilike(pattern),
                User.email.ilike(pattern),
            ))
        if self.status is not None:
            query = query.filter(User.status == self.status)
        return query


@dataclass
class LoanFilters:
    search: Optional[str] = None
    status: Optional[LoanDisplayStatus] = None
    user_id: Optional[int] = None
    book_id: Optional[int] = None

    def apply(self, query: Query, now: Optional[datetime] = None) -> Query:
        """Apply the filters to a query that already joins Loan to Book and User."""
        if self.search and self.search.strip():
            pattern = _pattern(self.search)
            query = query.filter(or_(
                Book.title.ilike(pattern),
                Book.author.ilike(pattern),
                User.name.ilike(pattern),
            ))
        if self.status == LoanDisplayStatus.OVERDUE:
            query = query.filter(overdue_clause(now or utcnow()))
        elif self.status is not None:
            query = query.filter(Loan.status == LoanStatus(self.status.value))
        if self.user_id is not None:
            query = query.filter(Loan.user_id == self.user_id)
        if self.book_id is not None:
            query = query.filter(Loan.book_id == self.book_id)
        return query

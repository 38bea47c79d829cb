# core/sa/repositories/loan.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, contains_eager

from ..models import Loan, LoanStatus, Book, User, utcnow
from .filters import LoanFilters, overdue_clause


class LoanRepository:
    """Repository for managing Loan entities."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, loan_id: int, for_update: bool = False) -> Optional[Loan]:
        """Get a loan by its ID.

        Args:
            loan_id: The ID of the loan
            for_update: Lock the row until the transaction ends and reload it

        Returns:
            The Loan object if found, None otherwise
        """
        query = self.session.query(Loan).filter(Loan.id == loan_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.one_or_none()

    def get_active_loan(self, user_id: int, book_id: int) -> Optional[Loan]:
        """Get the ACTIVE loan for a (user, book) pair, if any"""
        return (
            self.session.query(Loan)
            .filter(
                Loan.user_id == user_id,
                Loan.book_id == book_id,
                Loan.status == LoanStatus.ACTIVE
            )
            .first()
        )

    def count_active_for_book(self, book_id: int) -> int:
        return (
            self.session.query(Loan)
            .filter(Loan.book_id == book_id, Loan.status == LoanStatus.ACTIVE)
            .count()
        )

    def count_active_for_user(self, user_id: int) -> int:
        return (
            self.session.query(Loan)
            .filter(Loan.user_id == user_id, Loan.status == LoanStatus.ACTIVE)
            .count()
        )

    def _joined_query(self):
        return (
            self.session.query(Loan)
            .join(Loan.book)
            .join(Loan.user)
            .options(contains_eager(Loan.book), contains_eager(Loan.user))
        )

    def search_loans(
        self,
        filters: LoanFilters,
        limit: int = 20,
        offset: int = 0,
        now: Optional[datetime] = None
    ) -> List[Loan]:
        """Search loans, newest first, with book and user loaded.

        Args:
            filters: Search text, status (OVERDUE is derived from ``now``) and owner filters
            limit: Maximum number of results to return (default: 20)
            offset: Number of records to skip (default: 0)
            now: Reference time for the OVERDUE filter (default: current UTC time)

        Returns:
            List of matching Loan objects
        """
        query = filters.apply(self._joined_query(), now=now)
        return (
            query.order_by(Loan.loan_date.desc(), Loan.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_loans(self, filters: Optional[LoanFilters] = None, now: Optional[datetime] = None) -> int:
        query = self.session.query(Loan).join(Loan.book).join(Loan.user)
        if filters is not None:
            query = filters.apply(query, now=now)
        return query.count()

    def count_by_status(self, status: LoanStatus) -> int:
        return self.session.query(Loan).filter(Loan.status == status).count()

    def count_overdue(self, now: Optional[datetime] = None) -> int:
        """Number of ACTIVE loans whose due date has passed"""
        return self.session.query(Loan).filter(overdue_clause(now or utcnow())).count()

    def add(self, loan: Loan) -> Loan:
        self.session.add(loan)
        self.session.flush()
        return loan

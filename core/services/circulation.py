# core/services/circulation.py
"""Loan lifecycle: checkout, renewal and return.

Every mutation runs in one transaction. The book row is locked before its
copy count is checked, so two requests for the last copy are serialized and
the loser sees ``Unavailable``.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from core.errors import (
    NotFound, InvalidState, Unavailable, DuplicateLoan, RenewalLimitReached, ValidationError
)
from core.sa.models import Loan, LoanStatus, UserStatus, as_utc
from core.sa.repositories import BookRepository, UserRepository, LoanRepository, LoanFilters
from .base import BaseService, page_bounds

logger = logging.getLogger(__name__)


class CirculationService(BaseService):
    """Creates, renews and returns loans while keeping copy counts in step."""

    def __init__(self, session, settings=None, clock=None):
        super().__init__(session, settings=settings, clock=clock)
        self.books = BookRepository(session)
        self.users = UserRepository(session)
        self.loans = LoanRepository(session)

    def create_loan(self, user_id: int, book_id: int, due_date: Optional[datetime] = None) -> Loan:
        """Lend one copy of a book to a user.

        Args:
            user_id: The borrowing user
            book_id: The book to lend
            due_date: When the loan is due; defaults to the configured loan period from now

        Returns:
            The new ACTIVE loan

        Raises:
            ValidationError: If the due date is not after the loan date
            NotFound: If the user or the book does not exist
            InvalidState: If the user is not ACTIVE
            Unavailable: If no copy of the book is left
            DuplicateLoan: If the user already holds an active loan for the book
        """
        now = self.clock()
        if due_date is None:
            due_date = now + timedelta(days=self.settings.loan_days)
        due_date = as_utc(due_date)
        if due_date <= now:
            raise ValidationError(
                "Due date must be after the loan date",
                details=[{"field": "due_date", "message": "must be in the future"}]
            )

        with self._transaction():
            user = self.users.get_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound(f"User {user_id} not found")
            book = self.books.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound(f"Book {book_id} not found")

            if user.status != UserStatus.ACTIVE:
                logger.warning("Refused loan of book %s: user %s is %s", book_id, user_id, user.status.value)
                raise InvalidState(f"User {user_id} is {user.status.value.lower()} and cannot borrow books")
            if book.available_copies <= 0:
                logger.warning("Refused loan of book %s to user %s: no copies available", book_id, user_id)
                raise Unavailable(f"No copies of '{book.title}' are available")
            if self.loans.get_active_loan(user_id, book_id) is not None:
                raise DuplicateLoan(f"User {user_id} already has '{book.title}' on loan")

            if not self.books.decrement_available(book):
                raise Unavailable(f"No copies of '{book.title}' are available")

            loan = Loan(
                user_id=user_id,
                book_id=book_id,
                loan_date=now,
                due_date=due_date,
                status=LoanStatus.ACTIVE,
                renewal_count=0,
                max_renewals=self.settings.max_renewals
            )
            self.loans.add(loan)

        logger.info("Loan %s created: book %s to user %s, due %s", loan.id, book_id, user_id, due_date.isoformat())
        return loan

    def renew_loan(self, loan_id: int) -> Loan:
        """Push the due date of an active loan back by one renewal period.

        Overdue loans may be renewed; the new due date counts from the old one.

        Raises:
            NotFound: If the loan does not exist
            InvalidState: If the loan is not ACTIVE
            RenewalLimitReached: If the loan has no renewals left
        """
        with self._transaction():
            loan = self.loans.get_by_id(loan_id, for_update=True)
            if loan is None:
                raise NotFound(f"Loan {loan_id} not found")
            if loan.status != LoanStatus.ACTIVE:
                raise InvalidState(f"Loan {loan_id} is not active")
            if loan.renewal_count >= loan.max_renewals:
                logger.warning("Refused renewal of loan %s: limit of %s reached", loan_id, loan.max_renewals)
                raise RenewalLimitReached(
                    f"Loan {loan_id} has already been renewed {loan.renewal_count} times"
                )

            loan.due_date = as_utc(loan.due_date) + timedelta(days=self.settings.renewal_days)
            loan.renewal_count += 1

        logger.info("Loan %s renewed (%s/%s)", loan.id, loan.renewal_count, loan.max_renewals)
        return loan

    def return_loan(self, loan_id: int) -> Loan:
        """Close an active loan and put its copy back on the shelf.

        Raises:
            NotFound: If the loan does not exist
            InvalidState: If the loan has already been returned
        """
        with self._transaction():
            loan = self.loans.get_by_id(loan_id, for_update=True)
            if loan is None:
                raise NotFound(f"Loan {loan_id} not found")
            if loan.status != LoanStatus.ACTIVE:
                raise InvalidState(f"Loan {loan_id} is not active")

            book = self.books.get_by_id(loan.book_id, for_update=True)
            loan.status = LoanStatus.RETURNED
            loan.return_date = self.clock()
            if not self.books.increment_available(book):
                # Copies were cut below the number on loan; keep available <= total
                logger.warning("Book %s already has all copies on the shelf; count left unchanged", book.id)

        logger.info("Loan %s returned", loan.id)
        return loan

    def get_loan(self, loan_id: int) -> Loan:
        loan = self.loans.get_by_id(loan_id)
        if loan is None:
            raise NotFound(f"Loan {loan_id} not found")
        return loan

    def list_loans(self, filters: LoanFilters, page: int = 1, size: int = 20) -> Tuple[List[Loan], int]:
        """Page through loans matching ``filters``; OVERDUE is judged at the service clock."""
        limit, offset = page_bounds(page, size)
        now = self.clock()
        loans = self.loans.search_loans(filters, limit=limit, offset=offset, now=now)
        total = self.loans.count_loans(filters, now=now)
        return loans, total

# api/routes/loans.py

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.sa.models import LoanDisplayStatus, utcnow
from core.sa.repositories import LoanFilters
from core.services.circulation import CirculationService
from core.services.overdue import project_status
from api.dependencies import get_circulation_service
from api.schemas.loan import Loan, LoanList, LoanCreate

router = APIRouter(prefix="/loans", tags=["loans"])


def _to_schema(loan, now: Optional[datetime] = None) -> Loan:
    return Loan(
        id=loan.id,
        user_id=loan.user_id,
        book_id=loan.book_id,
        book_title=loan.book.title,
        book_author=loan.book.author,
        user_name=loan.user.name,
        user_email=loan.user.email,
        loan_date=loan.loan_date,
        due_date=loan.due_date,
        return_date=loan.return_date,
        status=project_status(loan, now),
        renewal_count=loan.renewal_count,
        max_renewals=loan.max_renewals
    )


@router.get("", response_model=LoanList)
def get_loans(
    search: Optional[str] = Query(None, description="Search book title, book author or user name"),
    status: Optional[LoanDisplayStatus] = Query(None, description="ACTIVE, RETURNED or OVERDUE"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    service: CirculationService = Depends(get_circulation_service)
):
    """
    Get a paginated list of loans, newest first.

    OVERDUE is not stored: it selects ACTIVE loans whose due date has passed,
    and those loans are reported with status OVERDUE.

    Args:
        search: Optional text matched against book title, book author and user name
        status: Optional status to filter by
        page: Page number (1-based)
        size: Number of items per page

    Returns:
        LoanList containing paginated loans
    """
    loans, total = service.list_loans(LoanFilters(search=search, status=status), page=page, size=size)
    now = utcnow()
    return LoanList(
        items=[_to_schema(loan, now) for loan in loans],
        total=total,
        page=page,
        size=size
    )


@router.post("", response_model=Loan, status_code=201)
def create_loan(loan: LoanCreate, service: CirculationService = Depends(get_circulation_service)):
    """Lend a book. Fails if the user is not active, no copy is left, or the user already has it."""
    created = service.create_loan(loan.user_id, loan.book_id, loan.due_date)
    return _to_schema(created)


@router.get("/{loan_id}", response_model=Loan)
def get_loan(loan_id: int, service: CirculationService = Depends(get_circulation_service)):
    return _to_schema(service.get_loan(loan_id))


@router.post("/{loan_id}/renew", response_model=Loan)
def renew_loan(loan_id: int, service: CirculationService = Depends(get_circulation_service)):
    return _to_schema(service.renew_loan(loan_id))


@router.post("/{loan_id}/return", response_model=Loan)
def return_loan(loan_id: int, service: CirculationService = Depends(get_circulation_service)):
    return _to_schema(service.return_loan(loan_id))

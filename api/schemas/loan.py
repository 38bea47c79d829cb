# api/schemas/loan.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from core.sa.models import LoanDisplayStatus


class LoanCreate(BaseModel):
    user_id: int
    book_id: int
    # Defaults to the configured loan period when omitted
    due_date: Optional[datetime] = None


class Loan(BaseModel):
    id: int
    user_id: int
    book_id: int
    book_title: str
    book_author: str
    user_name: str
    user_email: str
    loan_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    status: LoanDisplayStatus
    renewal_count: int
    max_renewals: int

    model_config = ConfigDict(from_attributes=True)


class LoanList(BaseModel):
    items: List[Loan]
    total: int
    page: int
    size: int

    model_config = ConfigDict(from_attributes=True)

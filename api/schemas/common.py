# api/schemas/common.py
from typing import Any, List, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[Any]] = None


class MessageResponse(BaseModel):
    message: str


class DashboardStats(BaseModel):
    total_books: int
    total_users: int
    active_loans: int
    overdue_loans: int

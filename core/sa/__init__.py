# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Book, User, Loan,
    MembershipType, UserStatus, LoanStatus
)

__all__ = [
    'Database',
    'Base',
    'Book',
    'User',
    'Loan',
    'MembershipType',
    'UserStatus',
    'LoanStatus'
]

# core/sa/models/__init__.py
from .base import Base, TimestampMixin, UTCDateTime, as_utc, utcnow
from .book import Book
from .user import User, MembershipType, UserStatus
from .loan import Loan, LoanStatus, LoanDisplayStatus

__all__ = [
    'Base',
    'TimestampMixin',
    'UTCDateTime',
    'as_utc',
    'utcnow',
    'Book',
    'User',
    'MembershipType',
    'UserStatus',
    'Loan',
    'LoanStatus',
    'LoanDisplayStatus'
]

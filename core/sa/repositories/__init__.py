# core/sa/repositories/__init__.py
from .book import BookRepository
from .user import UserRepository
from .loan import LoanRepository
from .filters import BookFilters, UserFilters, LoanFilters, overdue_clause

__all__ = [
    'BookRepository',
    'UserRepository',
    'LoanRepository',
    'BookFilters',
    'UserFilters',
    'LoanFilters',
    'overdue_clause'
]

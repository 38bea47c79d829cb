# tests/test_sa/conftest.py
import pytest
from datetime import datetime, timedelta, UTC

from core.sa.models import Book, User, Loan, LoanStatus, MembershipType, UserStatus
from core.services.catalog import CatalogService
from core.services.circulation import CirculationService
from core.services.members import MemberService

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def circulation(db_session, test_settings):
    """CirculationService whose clock is frozen at NOW"""
    return CirculationService(db_session, settings=test_settings, clock=lambda: NOW)


@pytest.fixture
def catalog(db_session, test_settings):
    return CatalogService(db_session, settings=test_settings, clock=lambda: NOW)


@pytest.fixture
def members(db_session, test_settings):
    return MemberService(db_session, settings=test_settings, clock=lambda: NOW)


@pytest.fixture
def make_book(db_session):
    """Factory for books with every copy on the shelf."""
    counter = {"n": 0}

    def _make(total_copies=1, **overrides):
        counter["n"] += 1
        fields = dict(
            title=f"Test Book {counter['n']}",
            author="Test Author",
            isbn=f"978-00000000{counter['n']:02d}",
            published_year=2020,
            genre="Fiction",
            total_copies=total_copies,
            available_copies=total_copies,
            description="Test book description"
        )
        fields.update(overrides)
        book = Book(**fields)
        db_session.add(book)
        db_session.commit()
        return book

    return _make


@pytest.fixture
def make_user(db_session):
    """Factory for ACTIVE student members."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = dict(
            name=f"Test User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            phone="5551234567",
            membership_type=MembershipType.STUDENT,
            status=UserStatus.ACTIVE
        )
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def sample_book(make_book):
    return make_book(total_copies=1, title="Test Book", isbn="1234567890")


@pytest.fixture
def sample_user(make_user):
    return make_user(name="Test User", email="test.user@example.com")


@pytest.fixture
def overdue_loan(db_session, make_book, make_user):
    """An ACTIVE loan whose due date was the day before NOW, stored as-is."""
    book = make_book(total_copies=2, available_copies=1, title="Late Book")
    user = make_user(name="Late Reader")
    loan = Loan(
        user_id=user.id,
        book_id=book.id,
        loan_date=NOW - timedelta(days=15),
        due_date=NOW - timedelta(days=1),
        status=LoanStatus.ACTIVE
    )
    db_session.add(loan)
    db_session.commit()
    return loan

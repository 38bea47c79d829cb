# tests/test_sa/test_models.py
import pytest
from datetime import datetime, timedelta, UTC
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from core.sa.models import Book, User, Loan, LoanStatus, MembershipType, UserStatus


def test_user_defaults(db_session):
    """Test that a new user is ACTIVE and gets a join date"""
    user = User(name="Ana", email="ana@example.com", phone="5551234567", membership_type=MembershipType.STUDENT)
    db_session.add(user)
    db_session.commit()

    assert user.status == UserStatus.ACTIVE
    assert user.join_date.tzinfo is not None
    assert user.created_at is not None
    assert user.updated_at is not None


def test_loan_defaults(db_session, sample_user, sample_book):
    loan = Loan(user_id=sample_user.id, book_id=sample_book.id, due_date=datetime.now(UTC) + timedelta(days=14))
    db_session.add(loan)
    db_session.commit()

    assert loan.status == LoanStatus.ACTIVE
    assert loan.renewal_count == 0
    assert loan.max_renewals == 2
    assert loan.return_date is None


def test_datetimes_come_back_as_utc(db_session, overdue_loan, now):
    db_session.expire_all()
    loan = db_session.get(Loan, overdue_loan.id)
    assert loan.due_date == now - timedelta(days=1)
    assert loan.due_date.utcoffset() == timedelta(0)


def test_enums_stored_by_name(db_session, sample_user):
    stored = db_session.execute(
        text("SELECT membership_type, status FROM user WHERE id = :id"), {"id": sample_user.id}
    ).one()
    assert tuple(stored) == ("STUDENT", "ACTIVE")


@pytest.mark.parametrize("total, available", [(0, 0), (2, -1), (2, 3)])
def test_book_copy_constraints(db_session, total, available):
    """Test that the database rejects copy counts out of bounds"""
    db_session.add(Book(
        title="Bad Counts", author="Nobody", isbn="9780000009999",
        published_year=2000, genre="Fiction",
        total_copies=total, available_copies=available
    ))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_isbn_unique(db_session, sample_book):
    db_session.add(Book(
        title="Copycat", author="Nobody", isbn=sample_book.isbn,
        published_year=2000, genre="Fiction", total_copies=1, available_copies=1
    ))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_loan_requires_existing_user(db_session, sample_book):
    db_session.add(Loan(user_id=999, book_id=sample_book.id, due_date=datetime.now(UTC)))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_book_relationships(db_session, overdue_loan):
    book = overdue_loan.book
    assert [loan.id for loan in book.loans] == [overdue_loan.id]
    assert overdue_loan.user.loans[0] is overdue_loan

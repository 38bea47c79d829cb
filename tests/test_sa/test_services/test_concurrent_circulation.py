# tests/test_sa/test_services/test_concurrent_circulation.py
"""Races between requests, each on its own session and connection."""

import threading

from core.errors import Unavailable, InvalidState
from core.sa.models import Book, User, Loan, LoanStatus, MembershipType
from core.services.circulation import CirculationService


def _run_together(target, args_list):
    """Start one thread per args tuple, release them at once, wait for all."""
    barrier = threading.Barrier(len(args_list))
    results = []
    lock = threading.Lock()

    def worker(*args):
        barrier.wait()
        outcome = target(*args)
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=args) for args in args_list]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def _seed_last_copy(database):
    with database.get_db() as session:
        book = Book(
            title="Last Copy", author="Someone", isbn="9780000000999",
            published_year=2001, genre="Fiction", total_copies=1, available_copies=1
        )
        readers = [
            User(name=f"Racer {i}", email=f"racer{i}@example.com", phone="5550000000",
                 membership_type=MembershipType.COMMUNITY)
            for i in range(2)
        ]
        session.add(book)
        session.add_all(readers)
        session.flush()
        return book.id, [reader.id for reader in readers]


def test_two_checkouts_race_for_last_copy(database, test_settings):
    """Exactly one of two simultaneous checkouts of the last copy succeeds."""
    book_id, user_ids = _seed_last_copy(database)

    def borrow(user_id):
        session = database.get_session()
        try:
            CirculationService(session, settings=test_settings).create_loan(user_id, book_id)
            return "ok"
        except Unavailable:
            return "unavailable"
        finally:
            session.close()

    results = _run_together(borrow, [(user_id,) for user_id in user_ids])
    assert sorted(results) == ["ok", "unavailable"]

    with database.get_db() as session:
        book = session.get(Book, book_id)
        assert book.available_copies == 0
        assert session.query(Loan).filter(Loan.book_id == book_id).count() == 1


def test_two_returns_race_for_same_loan(database, test_settings):
    """Returning the same loan twice at once counts the copy back once."""
    book_id, user_ids = _seed_last_copy(database)
    session = database.get_session()
    try:
        loan_id = CirculationService(session, settings=test_settings).create_loan(user_ids[0], book_id).id
    finally:
        session.close()

    def give_back(loan_id):
        session = database.get_session()
        try:
            CirculationService(session, settings=test_settings).return_loan(loan_id)
            return "ok"
        except InvalidState:
            return "not active"
        finally:
            session.close()

    results = _run_together(give_back, [(loan_id,), (loan_id,)])
    assert sorted(results) == ["not active", "ok"]

    with database.get_db() as session:
        assert session.get(Book, book_id).available_copies == 1
        assert session.get(Loan, loan_id).status == LoanStatus.RETURNED

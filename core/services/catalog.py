# core/services/catalog.py
import logging
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError

from core.errors import Conflict, NotFound, ValidationError
from core.sa.models import Book
from core.sa.repositories import BookRepository, LoanRepository, BookFilters
from .base import BaseService, page_bounds

logger = logging.getLogger(__name__)

BOOK_FIELDS = ("title", "author", "isbn", "published_year", "genre", "total_copies", "description")


def recompute_available(available: int, old_total: int, new_total: int) -> int:
    """Shift the available count by the change in total copies, never below zero.

    Active loans are not recounted, so after repeated edits that cut copies
    below the number on loan the result can drift from the true figure.
    """
    return max(0, available + (new_total - old_total))


class CatalogService(BaseService):
    """Book CRUD and copy-count maintenance."""

    def __init__(self, session, settings=None, clock=None):
        super().__init__(session, settings=settings, clock=clock)
        self.books = BookRepository(session)
        self.loans = LoanRepository(session)

    def get_book(self, book_id: int) -> Book:
        book = self.books.get_by_id(book_id)
        if book is None:
            raise NotFound(f"Book {book_id} not found")
        return book

    def list_books(self, filters: BookFilters, page: int = 1, size: int = 20) -> Tuple[List[Book], int]:
        limit, offset = page_bounds(page, size)
        return self.books.search_books(filters, limit=limit, offset=offset), self.books.count_books(filters)

    def create_book(
        self,
        title: str,
        author: str,
        isbn: str,
        published_year: int,
        genre: str,
        total_copies: int,
        description: Optional[str] = None
    ) -> Book:
        """Add a book with every copy on the shelf.

        Raises:
            ValidationError: If total_copies is below 1
            Conflict: If a book with the ISBN already exists
        """
        if total_copies < 1:
            raise ValidationError(
                "A book needs at least one copy",
                details=[{"field": "total_copies", "value": total_copies}]
            )

        with self._transaction():
            if self.books.get_by_isbn(isbn) is not None:
                raise Conflict(f"A book with ISBN {isbn} already exists")
            book = Book(
                title=title,
                author=author,
                isbn=isbn,
                published_year=published_year,
                genre=genre,
                total_copies=total_copies,
                available_copies=total_copies,
                description=description
            )
            try:
                self.books.add(book)
            except IntegrityError:
                raise Conflict(f"A book with ISBN {isbn} already exists")

        logger.info("Book %s created (ISBN %s, %s copies)", book.id, isbn, total_copies)
        return book

    def update_book(self, book_id: int, changes: Dict[str, Any]) -> Book:
        """Update book details; a new total_copies shifts available_copies with it.

        Args:
            book_id: The book to update
            changes: Field values keyed by name; unknown keys are rejected

        Raises:
            ValidationError: If an unknown field is given or total_copies is below 1
            NotFound: If the book does not exist
            Conflict: If the ISBN changes to one another book already has
        """
        unknown = sorted(set(changes) - set(BOOK_FIELDS))
        if unknown:
            raise ValidationError("Unknown book fields", details=[{"field": name} for name in unknown])

        with self._transaction():
            book = self.books.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound(f"Book {book_id} not found")

            new_isbn = changes.get("isbn")
            if new_isbn is not None and new_isbn != book.isbn:
                if self.books.get_by_isbn(new_isbn) is not None:
                    raise Conflict(f"A book with ISBN {new_isbn} already exists")

            for name, value in changes.items():
                if name != "total_copies":
                    setattr(book, name, value)
            if "total_copies" in changes:
                self._apply_total_copies(book, changes["total_copies"])

            try:
                self.session.flush()
            except IntegrityError:
                raise Conflict(f"A book with ISBN {new_isbn} already exists")

        logger.info("Book %s updated", book_id)
        return book

    def update_book_copies(self, book_id: int, new_total: int) -> Book:
        """Change the number of copies the library owns.

        Raises:
            ValidationError: If new_total is below 1
            NotFound: If the book does not exist
        """
        with self._transaction():
            book = self.books.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound(f"Book {book_id} not found")
            self._apply_total_copies(book, new_total)
        return book

    def _apply_total_copies(self, book: Book, new_total: int) -> None:
        if new_total < 1:
            raise ValidationError(
                "A book needs at least one copy",
                details=[{"field": "total_copies", "value": new_total}]
            )
        old_total = book.total_copies
        book.available_copies = recompute_available(book.available_copies, old_total, new_total)
        book.total_copies = new_total
        if new_total != old_total:
            logger.info(
                "Book %s copies %s -> %s, available now %s",
                book.id, old_total, new_total, book.available_copies
            )

    def delete_book(self, book_id: int) -> None:
        """Remove a book and its returned-loan history.

        Raises:
            NotFound: If the book does not exist
            Conflict: If any loan of the book is still ACTIVE
        """
        with self._transaction():
            book = self.books.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound(f"Book {book_id} not found")
            active = self.loans.count_active_for_book(book_id)
            if active:
                logger.warning("Refused to delete book %s: %s active loans", book_id, active)
                raise Conflict(f"Book {book_id} has {active} active loans and cannot be deleted")
            self.books.delete(book)

        logger.info("Book %s deleted", book_id)

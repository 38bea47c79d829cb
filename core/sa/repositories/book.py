# core/sa/repositories/book.py
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..models import Book
from .filters import BookFilters


class BookRepository:
    """Repository for managing Book entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: int, for_update: bool = False) -> Optional[Book]:
        """Get a book by its ID.

        Args:
            book_id: The ID of the book
            for_update: Lock the row until the transaction ends and reload it
                        even if the session already holds a copy

        Returns:
            The Book object if found, None otherwise
        """
        query = self.session.query(Book).filter(Book.id == book_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.one_or_none()

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        """Get a book by ISBN"""
        return self.session.query(Book).filter(Book.isbn == isbn).first()

    def search_books(self, filters: BookFilters, limit: int = 20, offset: int = 0) -> List[Book]:
        """Search books, ordered by title.

        Args:
            filters: Search text and availability filter
            limit: Maximum number of results to return (default: 20)
            offset: Number of records to skip (default: 0)

        Returns:
            List of matching Book objects
        """
        query = filters.apply(self.session.query(Book))
        return query.order_by(Book.title.asc(), Book.id.asc()).offset(offset).limit(limit).all()

    def count_books(self, filters: Optional[BookFilters] = None) -> int:
        """Count books matching the filters (all books when None)"""
        query = self.session.query(Book)
        if filters is not None:
            query = filters.apply(query)
        return query.count()

    def add(self, book: Book) -> Book:
        self.session.add(book)
        self.session.flush()
        return book

    def delete(self, book: Book) -> None:
        self.session.delete(book)
        self.session.flush()

    def decrement_available(self, book: Book) -> bool:
        """Take one copy of ``book`` off the shelf if any is left.

        The update is conditional, so the count cannot go negative even if two
        transactions get here for the last copy.

        Returns:
            False when no copy was available, True otherwise
        """
        result = self.session.execute(
            update(Book)
            .where(Book.id == book.id, Book.available_copies > 0)
            .values(available_copies=Book.available_copies - 1)
            .execution_options(synchronize_session=False)
        )
        self.session.expire(book, ['available_copies'])
        return result.rowcount == 1

    def increment_available(self, book: Book) -> bool:
        """Put one copy of ``book`` back on the shelf, never beyond total_copies."""
        result = self.session.execute(
            update(Book)
            .where(Book.id == book.id, Book.available_copies < Book.total_copies)
            .values(available_copies=Book.available_copies + 1)
            .execution_options(synchronize_session=False)
        )
        self.session.expire(book, ['available_copies'])
        return result.rowcount == 1

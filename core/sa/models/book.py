# core/sa/models/book.py
from sqlalchemy import String, Integer, Text, Index, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    isbn: Mapped[str] = mapped_column(String(17), nullable=False, unique=True)
    published_year: Mapped[int] = mapped_column(Integer, nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    loans = relationship('Loan', back_populates='book', cascade='all, delete-orphan', passive_deletes=True)

    __table_args__ = (
        CheckConstraint('total_copies >= 1', name='ck_book_total_copies_positive'),
        CheckConstraint('available_copies >= 0', name='ck_book_available_copies_non_negative'),
        CheckConstraint('available_copies <= total_copies', name='ck_book_available_within_total'),
        Index('idx_book_title', 'title'),
        Index('idx_book_author', 'author'),
    )

    def __repr__(self):
        return f"<Book id={self.id} isbn={self.isbn!r} available={self.available_copies}/{self.total_copies}>"

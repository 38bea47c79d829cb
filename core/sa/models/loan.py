# core/sa/models/loan.py
from datetime import datetime
from enum import Enum
from sqlalchemy import Integer, ForeignKey, Enum as SAEnum, Index, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, UTCDateTime, utcnow


class LoanStatus(str, Enum):
    """Stored loan states. OVERDUE is never stored, see core.services.overdue."""
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"


class LoanDisplayStatus(str, Enum):
    """Status as shown to readers: ACTIVE loans past their due date show as OVERDUE."""
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


class Loan(Base, TimestampMixin):
    __tablename__ = 'loan'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    loan_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    due_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    return_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    status: Mapped[LoanStatus] = mapped_column(
        SAEnum(LoanStatus, name='loan_status', native_enum=False, length=20),
        nullable=False,
        default=LoanStatus.ACTIVE
    )
    renewal_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_renewals: Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    # Relationships
    user = relationship('User', back_populates='loans')
    book = relationship('Book', back_populates='loans')

    __table_args__ = (
        CheckConstraint('renewal_count >= 0', name='ck_loan_renewal_count_non_negative'),
        Index('idx_loan_user_status', 'user_id', 'status'),
        Index('idx_loan_book_status', 'book_id', 'status'),
        Index('idx_loan_due_date', 'due_date'),
    )

    def __repr__(self):
        return f"<Loan id={self.id} user={self.user_id} book={self.book_id} status={self.status}>"

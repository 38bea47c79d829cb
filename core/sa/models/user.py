# core/sa/models/user.py
from datetime import datetime
from enum import Enum
from sqlalchemy import Integer, String, Enum as SAEnum, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, UTCDateTime, utcnow


class MembershipType(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    COMMUNITY = "COMMUNITY"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class User(Base, TimestampMixin):
    __tablename__ = 'user'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    membership_type: Mapped[MembershipType] = mapped_column(
        SAEnum(MembershipType, name='membership_type', native_enum=False, length=20),
        nullable=False
    )
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name='user_status', native_enum=False, length=20),
        nullable=False,
        default=UserStatus.ACTIVE
    )
    join_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    loans = relationship('Loan', back_populates='user', cascade='all, delete-orphan', passive_deletes=True)

    __table_args__ = (
        Index('idx_user_name', 'name'),
        Index('idx_user_status', 'status'),
    )

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r} status={self.status}>"

# core/sa/repositories/user.py
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import User, UserStatus, Loan, LoanStatus
from .filters import UserFilters


class UserRepository:
    """Repository for managing User (member) entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """Get a user by their ID.

        Args:
            user_id: The ID of the user to retrieve
            for_update: Lock the row until the transaction ends and reload it

        Returns:
            The User object if found, None otherwise
        """
        query = self.session.query(User).filter(User.id == user_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.one_or_none()

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address"""
        return self.session.query(User).filter(User.email == email).first()

    def _active_loans_subquery(self):
        return (
            self.session.query(
                Loan.user_id.label('user_id'),
                func.count(Loan.id).label('active_loans')
            )
            .filter(Loan.status == LoanStatus.ACTIVE)
            .group_by(Loan.user_id)
            .subquery()
        )

    def search_users(
        self,
        filters: UserFilters,
        limit: int = 20,
        offset: int = 0
    ) -> List[Tuple[User, int]]:
        """Search users, ordered by name, with their active loan counts.

        Args:
            filters: Search text and status filter
            limit: Maximum number of results to return (default: 20)
            offset: Number of records to skip (default: 0)

        Returns:
            List of (User, active loan count) tuples
        """
        counts = self._active_loans_subquery()
        query = (
            self.session.query(User, func.coalesce(counts.c.active_loans, 0))
            .outerjoin(counts, counts.c.user_id == User.id)
        )
        query = filters.apply(query)
        rows = query.order_by(User.name.asc(), User.id.asc()).offset(offset).limit(limit).all()
        return [(user, int(active)) for user, active in rows]

    def count_users(self, filters: Optional[UserFilters] = None) -> int:
        """Count users matching the filters (all users when None)"""
        query = self.session.query(User)
        if filters is not None:
            query = filters.apply(query)
        return query.count()

    def count_by_status(self, status: UserStatus) -> int:
        return self.session.query(User).filter(User.status == status).count()

    def count_active_loans(self, user_id: int) -> int:
        """Number of ACTIVE loans held by the user"""
        return (
            self.session.query(Loan)
            .filter(Loan.user_id == user_id, Loan.status == LoanStatus.ACTIVE)
            .count()
        )

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.flush()

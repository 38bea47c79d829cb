# core/services/members.py
import logging
from typing import Any, Dict, List, Tuple
from sqlalchemy.exc import IntegrityError

from core.errors import Conflict, NotFound, ValidationError
from core.sa.models import User, MembershipType, UserStatus
from core.sa.repositories import UserRepository, LoanRepository, UserFilters
from .base import BaseService, page_bounds

logger = logging.getLogger(__name__)

USER_FIELDS = ("name", "email", "phone", "membership_type", "status")


class MemberService(BaseService):
    """Member (user) CRUD."""

    def __init__(self, session, settings=None, clock=None):
        super().__init__(session, settings=settings, clock=clock)
        self.users = UserRepository(session)
        self.loans = LoanRepository(session)

    def get_user(self, user_id: int) -> Tuple[User, int]:
        """Get a user and the number of ACTIVE loans they hold."""
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user, self.users.count_active_loans(user_id)

    def list_users(self, filters: UserFilters, page: int = 1, size: int = 20) -> Tuple[List[Tuple[User, int]], int]:
        limit, offset = page_bounds(page, size)
        return self.users.search_users(filters, limit=limit, offset=offset), self.users.count_users(filters)

    def create_user(
        self,
        name: str,
        email: str,
        phone: str,
        membership_type: MembershipType,
        status: UserStatus = UserStatus.ACTIVE
    ) -> User:
        """Register a member.

        Raises:
            Conflict: If the email is already registered
        """
        with self._transaction():
            if self.users.get_by_email(email) is not None:
                raise Conflict(f"Email {email} is already registered")
            user = User(
                name=name,
                email=email,
                phone=phone,
                membership_type=MembershipType(membership_type),
                status=UserStatus(status),
                join_date=self.clock()
            )
            try:
                self.users.add(user)
            except IntegrityError:
                raise Conflict(f"Email {email} is already registered")

        logger.info("User %s registered (%s)", user.id, user.membership_type.value)
        return user

    def update_user(self, user_id: int, changes: Dict[str, Any]) -> User:
        """Update member details, including status.

        Raises:
            ValidationError: If an unknown field is given
            NotFound: If the user does not exist
            Conflict: If the email changes to one already registered
        """
        unknown = sorted(set(changes) - set(USER_FIELDS))
        if unknown:
            raise ValidationError("Unknown user fields", details=[{"field": name} for name in unknown])

        with self._transaction():
            user = self.users.get_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound(f"User {user_id} not found")

            new_email = changes.get("email")
            if new_email is not None and new_email != user.email:
                if self.users.get_by_email(new_email) is not None:
                    raise Conflict(f"Email {new_email} is already registered")

            for name, value in changes.items():
                if name == "membership_type":
                    value = MembershipType(value)
                elif name == "status":
                    value = UserStatus(value)
                setattr(user, name, value)

            try:
                self.session.flush()
            except IntegrityError:
                raise Conflict(f"Email {new_email} is already registered")

        logger.info("User %s updated", user_id)
        return user

    def delete_user(self, user_id: int) -> None:
        """Remove a member and their returned-loan history.

        Raises:
            NotFound: If the user does not exist
            Conflict: If the user still holds an ACTIVE loan
        """
        with self._transaction():
            user = self.users.get_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound(f"User {user_id} not found")
            active = self.loans.count_active_for_user(user_id)
            if active:
                logger.warning("Refused to delete user %s: %s active loans", user_id, active)
                raise Conflict(f"User {user_id} has {active} active loans and cannot be deleted")
            self.users.delete(user)

        logger.info("User %s deleted", user_id)

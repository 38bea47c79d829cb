# api/routes/users.py

from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.sa.models import UserStatus
from core.sa.repositories import UserFilters
from core.services.members import MemberService
from api.dependencies import get_member_service
from api.schemas.user import User, UserList, UserCreate, UserUpdate
from api.schemas.common import MessageResponse

router = APIRouter(prefix="/users", tags=["users"])


def _to_schema(user, active_loans: int = 0) -> User:
    return User.model_validate(user).model_copy(update={"active_loans": active_loans})


@router.get("", response_model=UserList)
def get_users(
    search: Optional[str] = Query(None, description="Search users by name or email"),
    status: Optional[UserStatus] = Query(None, description="Filter by membership status"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    service: MemberService = Depends(get_member_service)
):
    """
    Get a paginated list of users ordered by name, each with the number of
    loans they currently hold.

    Args:
        search: Optional search string matched against name and email
        status: Optional status to filter by
        page: Page number (1-based)
        size: Number of items per page

    Returns:
        UserList containing paginated users
    """
    rows, total = service.list_users(UserFilters(search=search, status=status), page=page, size=size)
    return UserList(
        items=[_to_schema(user, active) for user, active in rows],
        total=total,
        page=page,
        size=size
    )


@router.post("", response_model=User, status_code=201)
def create_user(user: UserCreate, service: MemberService = Depends(get_member_service)):
    created = service.create_user(**user.model_dump())
    return _to_schema(created)


@router.get("/{user_id}", response_model=User)
def get_user(user_id: int, service: MemberService = Depends(get_member_service)):
    user, active = service.get_user(user_id)
    return _to_schema(user, active)


@router.put("/{user_id}", response_model=User)
def update_user(user_id: int, user: UserUpdate, service: MemberService = Depends(get_member_service)):
    service.update_user(user_id, user.model_dump())
    updated, active = service.get_user(user_id)
    return _to_schema(updated, active)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, service: MemberService = Depends(get_member_service)):
    service.delete_user(user_id)
    return MessageResponse(message="User deleted")

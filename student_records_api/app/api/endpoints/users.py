"""
User listing and search endpoints.

``/search`` deliberately skips input validation to show how an
injected ``' OR '1'='1`` widens a lookup to every row; ``/search-safe``
validates the address and performs an exact lookup.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from student_records_api.app.api.deps import get_records
from student_records_api.app.core.storage import Records
from student_records_api.app.schemas.user import UserRead
from student_records_api.app.services.user_service import UserService

router = APIRouter()


def _require_email(email: Optional[str]) -> str:
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing email parameter")
    return email


@router.get("/users", response_model=List[UserRead])
async def list_users(records: Records = Depends(get_records)) -> List[UserRead]:
    return await UserService.list_users(records.users)


@router.get("/search", response_model=List[UserRead])
async def search_users(
    email: Optional[str] = Query(None, description="E-mail address or fragment"),
    records: Records = Depends(get_records),
) -> List[UserRead]:
    """Search users by e-mail without validating the input."""
    return await UserService.search_unsafe(records.users, _require_email(email))


@router.get("/search-safe", response_model=List[UserRead])
async def search_users_safe(
    email: Optional[str] = Query(None, description="Exact e-mail address"),
    records: Records = Depends(get_records),
) -> List[UserRead]:
    """Search users by exact e-mail after validating the input."""
    try:
        return await UserService.search_safe(records.users, _require_email(email))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

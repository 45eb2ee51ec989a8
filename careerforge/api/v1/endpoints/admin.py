import logging
import math
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query

from careerforge.api.deps import get_admin_user
from careerforge.core.errors import BadRequest, NotFound
from careerforge.crud import crud_resume, crud_user
from careerforge.schemas.documents import UserDoc
from careerforge.schemas.resume import ResumeSummary
from careerforge.schemas.user import (
    AdminStats,
    AdminUserUpdate,
    MessageResponse,
    Pagination,
    UserListData,
    UserRead,
    UserResponse,
)
from careerforge.services import account_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_user_or_404(user_id: str) -> UserDoc:
    user = await crud_user.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/users", response_model=MessageResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    admin: UserDoc = Depends(get_admin_user),
):
    users, total = await crud_user.list_users(page=page, limit=limit, search=search.strip())
    data = UserListData(
        users=[UserRead.model_validate(u) for u in users],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )
    return MessageResponse(message="Users returned successfully", data=data.model_dump())


@router.get("/stats", response_model=MessageResponse)
async def read_stats(admin: UserDoc = Depends(get_admin_user)):
    now = datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    stats = AdminStats(
        totalUsers=await crud_user.count_users(),
        totalResumes=await crud_resume.count_resumes(),
        newUsersThisWeek=await crud_user.count_users(since=now - timedelta(days=7)),
        newUsersToday=await crud_user.count_users(since=today),
        recentUsers=[UserRead.model_validate(u) for u in await crud_user.recent_users(5)],
    )
    return MessageResponse(message="Stats returned successfully", data=stats.model_dump())


@router.get("/users/{user_id}", response_model=MessageResponse)
async def read_user(user_id: str, admin: UserDoc = Depends(get_admin_user)):
    user = await _get_user_or_404(user_id)
    resumes = await crud_resume.get_resumes_for_user(user.id, limit=0)
    return MessageResponse(
        message="User returned successfully",
        data={
            "user": UserRead.model_validate(user).model_dump(),
            "resumes": [ResumeSummary.from_resume(r).model_dump() for r in resumes],
        },
    )


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, payload: AdminUserUpdate, admin: UserDoc = Depends(get_admin_user)):
    user = await _get_user_or_404(user_id)

    changes = {
        field: getattr(payload, field)
        for field in payload.model_fields_set
        if getattr(payload, field) is not None
    }
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        existing = await crud_user.get_user_by_email(changes["email"])
        if existing is not None and str(existing.id) != str(user.id):
            raise BadRequest("Email already in use")

    if "isAdmin" in changes and changes["isAdmin"] != user.isAdmin:
        logger.info("Admin %s set isAdmin=%s on user %s", admin.id, changes["isAdmin"], user.id)

    user = await crud_user.update_user(user, changes)
    return UserResponse(message="User updated successfully", data=UserRead.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, admin: UserDoc = Depends(get_admin_user)):
    user = await _get_user_or_404(user_id)
    if str(user.id) == str(admin.id):
        raise BadRequest("You cannot delete your own account from the admin panel")

    removed = await account_service.delete_account(user)
    return MessageResponse(message="User deleted successfully", data={"deletedResumes": removed})

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from careerforge.api.deps import get_current_user, get_resume_or_404
from careerforge.core.errors import NotFound
from careerforge.crud import crud_resume, crud_user
from careerforge.schemas.documents import UserDoc
from careerforge.schemas.user import MessageResponse
from careerforge.services import access_control, share_service

logger = logging.getLogger(__name__)

router = APIRouter()


class TrackShareRequest(BaseModel):
    platform: Optional[str] = Field(None, max_length=50)


@router.get("/{resume_id}/links", response_model=MessageResponse)
async def read_share_links(resume_id: str, user: UserDoc = Depends(get_current_user)):
    """Share URL plus prefilled links for social platforms; issues a token if none is active."""
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "share")

    token, created = share_service.ensure(resume)
    if created:
        resume = await crud_resume.save_resume(resume)

    share_url = share_service.build_share_url(token)
    return MessageResponse(
        message="Share links returned successfully",
        data={
            "shareUrl": share_url,
            "platforms": share_service.build_platform_links(resume, share_url),
            "expiresAt": resume.shareExpiry,
        },
    )


@router.get("/meta/{token}", response_model=MessageResponse)
async def read_share_meta(token: str):
    resume = await share_service.validate(token)
    if resume is None:
        raise NotFound("Resume not found or share link expired")

    owner = await crud_user.get_user(resume.user)
    meta = share_service.build_share_meta(
        resume,
        owner.name if owner else None,
        share_service.build_share_url(token),
    )
    return MessageResponse(message="Share metadata returned successfully", data=meta)


@router.post("/track/{token}", response_model=MessageResponse)
async def track_share(token: str, payload: Optional[TrackShareRequest] = None):
    resume = await crud_resume.get_resume_by_any_share_token(token)
    if resume is None:
        raise NotFound("Resume not found")

    platform = payload.platform if payload and payload.platform else "unknown"
    logger.info("Resume %s shared on %s", resume.id, platform)
    return MessageResponse(message="Share tracked successfully")


@router.delete("/{resume_id}", response_model=MessageResponse)
async def revoke_share_link(resume_id: str, user: UserDoc = Depends(get_current_user)):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "share")

    share_service.revoke(resume)
    await crud_resume.save_resume(resume)
    return MessageResponse(message="Share link revoked successfully")

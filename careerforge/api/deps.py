from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from careerforge.core.errors import AuthenticationFailed, NotFound, PermissionDenied
from careerforge.core.security import decode_access_token
from careerforge.crud import crud_resume, crud_user
from careerforge.schemas.documents import ResumeDoc, UserDoc
from careerforge.services.notification_service import EmailNotifier

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_credentials(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[UserDoc]:
    if credentials is None or not credentials.credentials:
        return None
    payload = decode_access_token(credentials.credentials)
    if not payload:
        return None
    return await crud_user.get_user(payload["id"])


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserDoc:
    if credentials is None:
        raise AuthenticationFailed("Not authorized to access this route")
    user = await _user_from_credentials(credentials)
    if user is None:
        raise AuthenticationFailed("Not authorized to access this route")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[UserDoc]:
    """Like get_current_user, but an absent or invalid token means anonymous."""
    return await _user_from_credentials(credentials)


async def get_admin_user(user: UserDoc = Depends(get_current_user)) -> UserDoc:
    if not user.isAdmin:
        raise PermissionDenied("Access denied. Admin privileges required.")
    return user


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


async def get_resume_or_404(resume_id: str) -> ResumeDoc:
    resume = await crud_resume.get_resume(resume_id)
    if resume is None:
        raise NotFound("Resume not found")
    return resume

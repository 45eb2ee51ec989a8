"""Share tokens: unauthenticated, time-limited read access to one resume.

Possession of the token is the only proof required by the shared view, so
tokens carry 256 bits from ``secrets``. Every share path goes through
``ensure``: an active token is reused, a missing or expired one is replaced.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from careerforge.core.config import settings
from careerforge.crud import crud_resume
from careerforge.schemas.resume import ResumeBase

TOKEN_BYTES = 32
SUMMARY_SNIPPET_LENGTH = 100
META_DESCRIPTION_LENGTH = 160


def _now(now: Optional[datetime] = None) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Mongo hands back naive UTC datetimes unless the client is tz aware
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def share_ttl() -> timedelta:
    return timedelta(days=settings.SHARE_LINK_TTL_DAYS)


def generate(resume: ResumeBase, now: Optional[datetime] = None) -> str:
    """Assign a fresh token and expiry, invalidating any previous token.

    The caller persists the mutation.
    """
    token = secrets.token_hex(TOKEN_BYTES)
    resume.shareToken = token
    resume.shareExpiry = _now(now) + share_ttl()
    return token


def is_active(resume: ResumeBase, now: Optional[datetime] = None) -> bool:
    """A token is valid only while now < shareExpiry."""
    if not resume.shareToken or resume.shareExpiry is None:
        return False
    return _now(now) < _as_utc(resume.shareExpiry)


def ensure(resume: ResumeBase, now: Optional[datetime] = None) -> Tuple[str, bool]:
    """Return (token, created). Reuses the active token when there is one."""
    if is_active(resume, now):
        return resume.shareToken, False
    return generate(resume, now), True


def revoke(resume: ResumeBase) -> None:
    resume.shareToken = None
    resume.shareExpiry = None


async def validate(token: str, now: Optional[datetime] = None):
    """Resolve a token to its resume, or None when unknown or expired.

    Expired and unknown tokens are indistinguishable to the caller.
    """
    if not token:
        return None
    return await crud_resume.get_resume_by_share_token(token, _now(now))


def build_share_url(token: str, origin: Optional[str] = None) -> str:
    base = (origin or settings.CORS_ORIGIN).rstrip("/")
    return f"{base}/resume/shared/{token}"


def display_title(resume: ResumeBase) -> str:
    full_name = resume.personalInfo.fullName if resume.personalInfo else None
    return full_name or resume.title


def build_platform_links(resume: ResumeBase, share_url: str) -> Dict[str, str]:
    encoded_url = quote(share_url, safe="")
    title = quote(f"Check out my resume: {display_title(resume)}", safe="")
    summary = resume.personalInfo.summary if resume.personalInfo else None
    description = quote((summary or "")[:SUMMARY_SNIPPET_LENGTH] or "View my professional resume", safe="")

    return {
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={encoded_url}",
        "twitter": f"https://twitter.com/intent/tweet?url={encoded_url}&text={title}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        "whatsapp": f"https://wa.me/?text={title}%20{encoded_url}",
        "telegram": f"https://t.me/share/url?url={encoded_url}&text={title}",
        "email": f"mailto:?subject={title}&body={description}%0A%0A{share_url}",
        "copy": share_url,
    }


def build_share_meta(resume: ResumeBase, owner_name: Optional[str], share_url: str) -> Dict[str, Any]:
    summary = resume.personalInfo.summary if resume.personalInfo else None
    return {
        "title": display_title(resume),
        "description": (summary or "")[:META_DESCRIPTION_LENGTH] or "Professional Resume",
        "name": owner_name or "Resume Builder User",
        "url": share_url,
        "type": "profile",
    }

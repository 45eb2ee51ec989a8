from typing import Any, Optional

from careerforge.core.errors import PermissionDenied


def is_owner(resume: Any, user: Optional[Any]) -> bool:
    if user is None or getattr(user, "id", None) is None:
        return False
    return str(resume.user) == str(user.id)


def can_read(resume: Any, user: Optional[Any]) -> bool:
    """Owners always read; anyone else only when the resume is public.

    Token-based access is handled by the shared-read path, never here.
    """
    return is_owner(resume, user) or bool(resume.isPublic)


def ensure_can_read(resume: Any, user: Optional[Any]) -> None:
    if not can_read(resume, user):
        raise PermissionDenied("Not authorized to access this resume")


def ensure_owner(resume: Any, user: Optional[Any], action: str = "update") -> None:
    """Writes, deletes, template changes and sharing are owner-only, public or not."""
    if not is_owner(resume, user):
        raise PermissionDenied(f"Not authorized to {action} this resume")

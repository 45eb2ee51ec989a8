from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from typing import Optional
from datetime import datetime, timezone
import pymongo

from careerforge.schemas.resume import ResumeBase
from careerforge.schemas.user import AuthProvider


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserDoc(Document):
    name: str
    email: Indexed(str, unique=True)
    password: Optional[str] = None
    profilePicture: Optional[str] = None
    profilePictureId: Optional[str] = None
    authProvider: AuthProvider = AuthProvider.LOCAL
    refreshToken: Optional[str] = None
    resetPasswordToken: Optional[str] = None
    resetPasswordExpire: Optional[datetime] = None
    lastLogin: Optional[datetime] = None
    isAdmin: bool = False
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"


class ResumeDoc(Document, ResumeBase):
    user: PydanticObjectId
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "resumes"
        indexes = [
            [("user", pymongo.ASCENDING), ("createdAt", pymongo.DESCENDING)],
            "shareToken",
        ]

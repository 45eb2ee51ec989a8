import pydantic
from pydantic import BaseModel, EmailStr, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
from bson import ObjectId


class AuthProvider(str, Enum):
    LOCAL = "local"


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @pydantic.field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any):
        return v.strip() if isinstance(v, str) else v

    @pydantic.field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @pydantic.field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RefreshRequest(BaseModel):
    refreshToken: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str = Field(..., min_length=6)


class AdminUserUpdate(BaseModel):
    isAdmin: Optional[bool] = None
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class UserRead(BaseModel):
    """Public view of a user; never carries password or token material."""
    id: Optional[str] = None
    name: str
    email: str
    profilePicture: Optional[str] = None
    authProvider: AuthProvider = AuthProvider.LOCAL
    isAdmin: bool = False
    lastLogin: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = pydantic.ConfigDict(from_attributes=True)

    @pydantic.field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any):
        if isinstance(v, ObjectId):
            return str(v)
        return v


class AuthPayload(BaseModel):
    user: UserRead
    accessToken: str
    refreshToken: str


class AuthResponse(BaseModel):
    status: int = 200
    message: str
    data: AuthPayload


class UserResponse(BaseModel):
    status: int = 200
    message: str = "User returned successfully"
    data: Optional[UserRead] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserListData(BaseModel):
    users: List[UserRead] = Field(default_factory=list)
    pagination: Pagination


class AdminStats(BaseModel):
    totalUsers: int
    totalResumes: int
    newUsersThisWeek: int
    newUsersToday: int
    recentUsers: List[UserRead] = Field(default_factory=list)


class MessageResponse(BaseModel):
    status: int = 200
    message: str
    data: Optional[Dict[str, Any]] = None

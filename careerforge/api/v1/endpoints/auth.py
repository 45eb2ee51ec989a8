import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, status

from careerforge.api.deps import get_current_user, get_notifier
from careerforge.core.config import settings
from careerforge.core.errors import AuthenticationFailed, BadRequest, NotFound
from careerforge.core.security import (
    create_access_token,
    create_refresh_token,
    create_reset_token,
    decode_refresh_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from careerforge.crud import crud_user
from careerforge.schemas.documents import UserDoc
from careerforge.schemas.user import (
    AuthPayload,
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserRead,
    UserResponse,
)
from careerforge.services.notification_service import EmailNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


async def _issue_tokens(user: UserDoc) -> AuthPayload:
    """Mint an access/refresh pair and persist the refresh token on the user."""
    access_token = create_access_token(str(user.id))
    refresh_token = create_refresh_token(str(user.id))
    user.refreshToken = refresh_token
    await crud_user.save_user(user)
    return AuthPayload(user=UserRead.model_validate(user), accessToken=access_token, refreshToken=refresh_token)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    notifier: EmailNotifier = Depends(get_notifier),
):
    if await crud_user.get_user_by_email(payload.email):
        raise BadRequest("User already exists")

    user = await crud_user.create_user(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        is_admin=payload.email in settings.admin_emails,
    )
    logger.info("Registered user %s", user.id)

    data = await _issue_tokens(user)
    background_tasks.add_task(notifier.user_registered, user)
    return AuthResponse(status=status.HTTP_201_CREATED, message="User registered successfully", data=data)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    background_tasks: BackgroundTasks,
    notifier: EmailNotifier = Depends(get_notifier),
):
    user = await crud_user.get_user_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password):
        raise AuthenticationFailed("Invalid credentials")

    user.lastLogin = datetime.now(timezone.utc)
    if user.email in settings.admin_emails and not user.isAdmin:
        logger.info("Elevating allow-listed user %s to admin", user.id)
        user.isAdmin = True

    data = await _issue_tokens(user)
    background_tasks.add_task(notifier.user_login, user)
    return AuthResponse(message="Login successful", data=data)


@router.post("/refresh-token", response_model=MessageResponse)
async def refresh_token(payload: RefreshRequest):
    claims = decode_refresh_token(payload.refreshToken)
    if not claims:
        raise AuthenticationFailed("Invalid refresh token")

    user = await crud_user.get_user(claims["id"])
    if user is None or user.refreshToken != payload.refreshToken:
        raise AuthenticationFailed("Invalid refresh token")

    data = await _issue_tokens(user)
    return MessageResponse(
        message="Token refreshed successfully",
        data={"accessToken": data.accessToken, "refreshToken": data.refreshToken},
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(user: UserDoc = Depends(get_current_user)):
    user.refreshToken = None
    await crud_user.save_user(user)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def read_me(user: UserDoc = Depends(get_current_user)):
    return UserResponse(data=UserRead.model_validate(user))


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    notifier: EmailNotifier = Depends(get_notifier),
):
    user = await crud_user.get_user_by_email(payload.email)
    if user is None:
        raise NotFound("User not found")

    raw_token, digest, expires = create_reset_token()
    user.resetPasswordToken = digest
    user.resetPasswordExpire = expires
    await crud_user.save_user(user)

    origin = (settings.FRONTEND_URL or settings.CORS_ORIGIN).rstrip("/")
    reset_url = f"{origin}/reset-password/{raw_token}"
    background_tasks.add_task(notifier.password_reset, user, reset_url, settings.RESET_TOKEN_EXPIRES_MINUTES)

    data = {"resetToken": raw_token} if settings.EXPOSE_RESET_TOKEN else None
    return MessageResponse(message="Password reset email sent", data=data)


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(token: str, payload: ResetPasswordRequest):
    user = await crud_user.get_user_by_reset_token(hash_reset_token(token), datetime.now(timezone.utc))
    if user is None:
        raise BadRequest("Invalid or expired reset token")

    user.password = hash_password(payload.password)
    user.resetPasswordToken = None
    user.resetPasswordExpire = None
    # existing sessions must log in again
    user.refreshToken = None
    await crud_user.save_user(user)
    return MessageResponse(message="Password reset successful")

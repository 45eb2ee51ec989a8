from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from careerforge.api.deps import get_current_user, get_notifier
from careerforge.core.config import settings
from careerforge.core.errors import ApiError, BadRequest
from careerforge.core.security import hash_password, verify_password
from careerforge.crud import crud_user
from careerforge.schemas.documents import UserDoc
from careerforge.schemas.user import MessageResponse, PasswordChange, ProfileUpdate, UserRead, UserResponse
from careerforge.services import account_service
from careerforge.services.document_inspection import is_allowed_image
from careerforge.services.notification_service import EmailNotifier
from careerforge.tools import file_uploader

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def read_profile(user: UserDoc = Depends(get_current_user)):
    return UserResponse(data=UserRead.model_validate(user))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdate,
    background_tasks: BackgroundTasks,
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    changes = {}
    if payload.name is not None and payload.name != user.name:
        changes["name"] = payload.name
    if payload.email is not None:
        email = payload.email.lower()
        if email != user.email:
            if await crud_user.get_user_by_email(email):
                raise BadRequest("Email already in use")
            changes["email"] = email

    if changes:
        user = await crud_user.update_user(user, changes)
        background_tasks.add_task(notifier.profile_updated, user, list(changes))
    return UserResponse(message="Profile updated successfully", data=UserRead.model_validate(user))


@router.put("/password", response_model=MessageResponse)
async def change_password(payload: PasswordChange, user: UserDoc = Depends(get_current_user)):
    if not verify_password(payload.currentPassword, user.password):
        raise BadRequest("Current password is incorrect")

    await crud_user.update_user(user, {"password": hash_password(payload.newPassword)})
    return MessageResponse(message="Password updated successfully")


@router.post("/profile-picture", response_model=UserResponse)
async def upload_profile_picture(
    profilePicture: UploadFile = File(...),
    user: UserDoc = Depends(get_current_user),
):
    if not is_allowed_image(profilePicture.filename, profilePicture.content_type):
        raise BadRequest("Only image files are allowed!")

    try:
        path = await file_uploader.save_upload_to_temp(profilePicture, settings.MAX_IMAGE_UPLOAD_BYTES)
    except file_uploader.UploadTooLarge as e:
        raise BadRequest(str(e))

    with file_uploader.temporary_file(path):
        uploaded = await file_uploader.upload_file(path, "profile-pictures")
    if uploaded is None:
        raise ApiError("Failed to upload profile picture")

    old_picture_id = user.profilePictureId
    user = await crud_user.update_user(
        user, {"profilePicture": uploaded["url"], "profilePictureId": uploaded["public_id"]}
    )
    await file_uploader.delete_file(old_picture_id)
    return UserResponse(message="Profile picture updated successfully", data=UserRead.model_validate(user))


@router.delete("/account", response_model=MessageResponse)
async def delete_my_account(user: UserDoc = Depends(get_current_user)):
    removed = await account_service.delete_account(user)
    return MessageResponse(message="Account deleted successfully", data={"deletedResumes": removed})

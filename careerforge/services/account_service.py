import logging

from careerforge.crud import crud_resume, crud_user
from careerforge.schemas.documents import UserDoc
from careerforge.tools import file_uploader

logger = logging.getLogger(__name__)


async def delete_account(user: UserDoc) -> int:
    """
    Remove a user together with everything they own: resumes, the stored
    originals of uploaded resumes and the profile picture.

    Returns the number of resumes removed.
    """
    resumes = await crud_resume.get_resumes_for_user(user.id, limit=0)
    for resume in resumes:
        if resume.originalFile and resume.originalFile.storageId:
            await file_uploader.delete_file(resume.originalFile.storageId)

    await crud_resume.delete_resumes_for_user(user.id)
    await file_uploader.delete_file(user.profilePictureId)
    await crud_user.delete_user(user)

    logger.info("Deleted account %s with %d resumes", user.id, len(resumes))
    return len(resumes)

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from beanie import PydanticObjectId
from bson import ObjectId

from careerforge.schemas.documents import ResumeDoc
from careerforge.schemas.resume import OriginalFile, ResumeCreate, ResumeTemplate


def to_object_id(value: Any) -> Optional[PydanticObjectId]:
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if isinstance(value, str) and ObjectId.is_valid(value):
        return PydanticObjectId(value)
    return None


async def get_resume(resume_id: str) -> Optional[ResumeDoc]:
    oid = to_object_id(resume_id)
    if oid is None:
        return None
    return await ResumeDoc.get(oid)


async def get_resumes_for_user(user_id: Any, skip: int = 0, limit: int = 100) -> List[ResumeDoc]:
    return await ResumeDoc.find_many({"user": to_object_id(user_id)}).sort("-updatedAt").skip(skip).limit(limit).to_list()


async def get_resume_by_share_token(token: str, now: datetime) -> Optional[ResumeDoc]:
    # strict ">" : a token expiring exactly now is already expired
    return await ResumeDoc.find_one({"shareToken": token, "shareExpiry": {"$gt": now}})


async def get_resume_by_any_share_token(token: str) -> Optional[ResumeDoc]:
    return await ResumeDoc.find_one({"shareToken": token})


async def create_resume(owner_id: Any, data: ResumeCreate) -> ResumeDoc:
    resume = ResumeDoc(user=to_object_id(owner_id), **data.model_dump())
    await resume.insert()
    return resume


async def create_uploaded_resume(owner_id: Any, title: str, template: ResumeTemplate, original_file: OriginalFile) -> ResumeDoc:
    resume = ResumeDoc(user=to_object_id(owner_id), title=title, template=template, originalFile=original_file)
    await resume.insert()
    return resume


async def update_resume(resume: ResumeDoc, changes: Dict[str, Any]) -> ResumeDoc:
    for key, value in changes.items():
        setattr(resume, key, value)
    return await save_resume(resume)


async def save_resume(resume: ResumeDoc) -> ResumeDoc:
    resume.updatedAt = datetime.now(timezone.utc)
    await resume.save()
    return resume


async def delete_resume(resume: ResumeDoc) -> None:
    await resume.delete()


async def delete_resumes_for_user(user_id: Any) -> None:
    await ResumeDoc.find_many({"user": to_object_id(user_id)}).delete()


async def count_resumes() -> int:
    return await ResumeDoc.find_all().count()

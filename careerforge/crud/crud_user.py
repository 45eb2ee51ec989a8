import re
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone

from careerforge.crud.crud_resume import to_object_id
from careerforge.schemas.documents import UserDoc


async def get_user(user_id: Any) -> Optional[UserDoc]:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    return await UserDoc.get(oid)


async def get_user_by_email(email: str) -> Optional[UserDoc]:
    return await UserDoc.find_one({"email": email.lower()})


async def get_user_by_reset_token(token_hash: str, now: datetime) -> Optional[UserDoc]:
    return await UserDoc.find_one({"resetPasswordToken": token_hash, "resetPasswordExpire": {"$gt": now}})


async def create_user(name: str, email: str, password_hash: str, is_admin: bool = False) -> UserDoc:
    user = UserDoc(name=name, email=email.lower(), password=password_hash, isAdmin=is_admin)
    await user.insert()
    return user


async def save_user(user: UserDoc) -> UserDoc:
    user.updatedAt = datetime.now(timezone.utc)
    await user.save()
    return user


async def update_user(user: UserDoc, changes: Dict[str, Any]) -> UserDoc:
    for key, value in changes.items():
        setattr(user, key, value)
    return await save_user(user)


async def delete_user(user: UserDoc) -> None:
    await user.delete()


def _search_query(search: str) -> Dict[str, Any]:
    if not search:
        return {}
    pattern = re.escape(search)
    return {"$or": [
        {"name": {"$regex": pattern, "$options": "i"}},
        {"email": {"$regex": pattern, "$options": "i"}},
    ]}


async def list_users(page: int = 1, limit: int = 20, search: str = "") -> Tuple[List[UserDoc], int]:
    query = _search_query(search)
    users = await UserDoc.find_many(query).sort("-createdAt").skip((page - 1) * limit).limit(limit).to_list()
    total = await UserDoc.find_many(query).count()
    return users, total


async def count_users(since: Optional[datetime] = None) -> int:
    query = {"createdAt": {"$gte": since}} if since else {}
    return await UserDoc.find_many(query).count()


async def recent_users(limit: int = 5) -> List[UserDoc]:
    return await UserDoc.find_all().sort("-createdAt").limit(limit).to_list()

import os
from datetime import datetime, timezone

# Settings are read at import time; keep tests away from real services.
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DATABASE", "careerforge_test")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("CORS_ORIGIN", "http://localhost:5173")
os.environ["GMAIL_USER"] = ""
os.environ["GMAIL_APP_PASSWORD"] = ""
os.environ["ADMIN_EMAILS"] = "boss@example.com"

import pytest
from beanie import PydanticObjectId
from fastapi.testclient import TestClient

from careerforge.schemas.documents import ResumeDoc, UserDoc
from careerforge.schemas.resume import ResumeBase
from careerforge.schemas.user import AuthProvider


def make_user(name="Jane Doe", email="jane@example.com", is_admin=False, **extra) -> UserDoc:
    """Build a user without touching Mongo."""
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    values = {
        "id": PydanticObjectId(),
        "name": name,
        "email": email,
        "password": None,
        "profilePicture": None,
        "profilePictureId": None,
        "authProvider": AuthProvider.LOCAL,
        "refreshToken": None,
        "resetPasswordToken": None,
        "resetPasswordExpire": None,
        "lastLogin": None,
        "isAdmin": is_admin,
        "createdAt": now,
        "updatedAt": now,
    }
    values.update(extra)
    return UserDoc.model_construct(**values)


def make_resume(owner: UserDoc, **fields) -> ResumeDoc:
    """Validate content through the plain model, then wrap it as a document."""
    fields.setdefault("title", "Senior Engineer Resume")
    content = ResumeBase(**fields)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return ResumeDoc.model_construct(
        id=PydanticObjectId(),
        user=owner.id,
        createdAt=now,
        updatedAt=now,
        **dict(content),
    )


FULL_RESUME = {
    "title": "Jane's Resume 2024",
    "template": "modern",
    "personalInfo": {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0100",
        "address": "Berlin",
        "linkedIn": "https://linkedin.com/in/jane",
        "github": "https://github.com/jane",
        "summary": "Backend engineer focused on reliable APIs.",
    },
    "experience": [
        {
            "company": "Acme",
            "position": "Engineer",
            "location": "Remote",
            "startDate": "2022-01-15T00:00:00Z",
            "current": True,
            "description": "Built the billing platform.",
            "achievements": ["Cut p99 latency by 40%", "", "Led migration to Python 3.12"],
        }
    ],
    "education": [
        {
            "institution": "TU Berlin",
            "degree": "BSc",
            "field": "Computer Science",
            "startDate": "2016-10-01T00:00:00Z",
            "endDate": "2020-07-01T00:00:00Z",
            "grade": "1.3",
        }
    ],
    "skills": [{"name": "Python", "level": "Expert"}, {"name": "Go", "level": "Advanced"}],
    "projects": [
        {
            "name": "resumectl",
            "description": "CLI for resumes.",
            "technologies": ["Python", "Typer"],
            "link": "https://resumectl.dev",
            "github": "https://github.com/jane/resumectl",
        }
    ],
    "certifications": [
        {"name": "CKA", "issuer": "CNCF", "date": "2023-03-10T00:00:00Z", "expiryDate": "2026-03-10T00:00:00Z"}
    ],
    "languages": [{"name": "English", "proficiency": "Native"}, {"name": "German", "proficiency": "Fluent"}],
}


@pytest.fixture
def owner() -> UserDoc:
    return make_user()


@pytest.fixture
def stranger() -> UserDoc:
    return make_user(name="Mallory", email="mallory@example.com")


@pytest.fixture
def full_resume(owner) -> ResumeDoc:
    return make_resume(owner, **FULL_RESUME)


@pytest.fixture
def app():
    from main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # no context manager: the lifespan (Mongo connection) must not run
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def login_as(app):
    """Authenticate every subsequent request as ``user`` (None = anonymous)."""
    from careerforge.api.deps import get_current_user, get_optional_user

    def _login(user):
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user

    return _login


class ResumeStore:
    """Dict-backed replacement for the resume queries used by the endpoints."""

    def __init__(self, owner, *resumes):
        self.owner = owner
        self.docs = {str(r.id): r for r in resumes}

    async def get_resume(self, resume_id):
        return self.docs.get(str(resume_id))

    async def get_by_token(self, token, now):
        for doc in self.docs.values():
            if doc.shareToken == token and doc.shareExpiry is not None and doc.shareExpiry > now:
                return doc
        return None

    async def get_by_any_token(self, token):
        return next((d for d in self.docs.values() if d.shareToken == token), None)

    async def list_for_user(self, user_id, skip=0, limit=100):
        return [d for d in self.docs.values() if str(d.user) == str(user_id)]

    async def create(self, owner_id, data):
        doc = make_resume(self.owner, **data.model_dump())
        self.docs[str(doc.id)] = doc
        return doc

    async def create_uploaded(self, owner_id, title, template, original_file):
        doc = make_resume(self.owner, title=title, template=template, originalFile=original_file)
        self.docs[str(doc.id)] = doc
        return doc

    async def update(self, resume, changes):
        for key, value in changes.items():
            setattr(resume, key, value)
        return resume

    async def save(self, resume):
        return resume

    async def delete(self, resume):
        self.docs.pop(str(resume.id), None)

    async def get_user(self, user_id):
        return self.owner if str(user_id) == str(self.owner.id) else None

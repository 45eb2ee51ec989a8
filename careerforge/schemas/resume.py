import re
import pydantic
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional, Any
from datetime import datetime, timezone
from enum import Enum
from bson import ObjectId


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class LanguageProficiency(str, Enum):
    BASIC = "Basic"
    CONVERSATIONAL = "Conversational"
    FLUENT = "Fluent"
    NATIVE = "Native"


class ResumeTemplate(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    MINIMAL = "minimal"
    PROFESSIONAL = "professional"
    CREATIVE = "creative"


MONTH_INPUT = re.compile(r"^(\d{4})-(\d{2})$")


def month_input_to_datetime(v: Any):
    """Read ``"YYYY-MM"`` (what a month picker submits) as the first of that month, UTC."""
    if isinstance(v, str):
        match = MONTH_INPUT.match(v.strip())
        if match:
            return datetime(int(match.group(1)), int(match.group(2)), 1, tzinfo=timezone.utc)
    return v


MonthDate = Annotated[Optional[datetime], pydantic.BeforeValidator(month_input_to_datetime)]


class ResumeSection(BaseModel):
    """Base for every embedded resume record.

    Clients send "" for blank inputs; those are stored as absent values so the
    renderers only ever branch on ``None``.
    """
    model_config = pydantic.ConfigDict(extra="ignore", str_strip_whitespace=True)

    @pydantic.field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PersonalInfo(ResumeSection):
    fullName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    linkedIn: Optional[str] = None
    portfolio: Optional[str] = None
    github: Optional[str] = None
    summary: Optional[str] = None


class Education(ResumeSection):
    institution: str
    degree: str
    field: Optional[str] = None
    startDate: MonthDate = None
    endDate: MonthDate = None
    grade: Optional[str] = None
    description: Optional[str] = None


class Experience(ResumeSection):
    company: str
    position: str
    location: Optional[str] = None
    startDate: MonthDate = None
    endDate: MonthDate = None
    current: bool = False
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)

    @pydantic.field_validator("achievements", mode="after")
    @classmethod
    def drop_blank_achievements(cls, v: List[str]) -> List[str]:
        return [a.strip() for a in v if a and a.strip()]


class Skill(ResumeSection):
    name: str
    level: SkillLevel = SkillLevel.INTERMEDIATE


class Project(ResumeSection):
    name: str
    description: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    link: Optional[str] = None
    github: Optional[str] = None


class Certification(ResumeSection):
    name: str
    issuer: Optional[str] = None
    date: MonthDate = None
    expiryDate: MonthDate = None
    link: Optional[str] = None
    credentialId: Optional[str] = None


class Language(ResumeSection):
    name: str
    proficiency: LanguageProficiency = LanguageProficiency.CONVERSATIONAL


class OriginalFile(BaseModel):
    url: Optional[str] = None
    storageId: Optional[str] = None
    filename: Optional[str] = None


class ResumeContent(BaseModel):
    """The structured body of a resume: everything the renderers consume."""
    title: str = Field(..., min_length=1, max_length=100)
    personalInfo: PersonalInfo = Field(default_factory=PersonalInfo)
    education: List[Education] = Field(default_factory=list)
    experience: List[Experience] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    languages: List[Language] = Field(default_factory=list)
    template: ResumeTemplate = ResumeTemplate.MODERN

    @pydantic.field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any):
        return v.strip() if isinstance(v, str) else v

    @pydantic.field_validator("personalInfo", mode="before")
    @classmethod
    def personal_info_default(cls, v: Any):
        return {} if v is None else v


class ResumeBase(ResumeContent):
    isPublic: bool = False
    shareToken: Optional[str] = None
    shareExpiry: Optional[datetime] = None
    originalFile: Optional[OriginalFile] = None


class ResumeCreate(ResumeContent):
    isPublic: bool = False

    model_config = pydantic.ConfigDict(extra="ignore")


class ResumeUpdate(BaseModel):
    """Partial update; only fields that were sent are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    personalInfo: Optional[PersonalInfo] = None
    education: Optional[List[Education]] = None
    experience: Optional[List[Experience]] = None
    skills: Optional[List[Skill]] = None
    projects: Optional[List[Project]] = None
    certifications: Optional[List[Certification]] = None
    languages: Optional[List[Language]] = None
    template: Optional[ResumeTemplate] = None
    isPublic: Optional[bool] = None

    model_config = pydantic.ConfigDict(extra="ignore")

    @pydantic.field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any):
        return v.strip() if isinstance(v, str) else v


class TemplateUpdate(BaseModel):
    template: ResumeTemplate


def _coerce_objectid_to_str(v: Any):
    # Convert MongoDB ObjectId to string so Pydantic validation succeeds
    if v is None:
        return None
    if isinstance(v, ObjectId):
        return str(v)
    return v if isinstance(v, str) else str(v)


class ResumeRead(ResumeBase):
    id: Optional[str] = None
    user: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = pydantic.ConfigDict(from_attributes=True)

    @pydantic.field_validator("id", "user", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any):
        return _coerce_objectid_to_str(v)


class ResumeSummary(BaseModel):
    """Projection used by the dashboard list."""
    id: Optional[str] = None
    title: str
    template: ResumeTemplate = ResumeTemplate.MODERN
    isPublic: bool = False
    fullName: Optional[str] = None
    originalFile: Optional[OriginalFile] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = pydantic.ConfigDict(from_attributes=True)

    @pydantic.field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any):
        return _coerce_objectid_to_str(v)

    @classmethod
    def from_resume(cls, resume: Any) -> "ResumeSummary":
        personal = getattr(resume, "personalInfo", None)
        return cls(
            id=resume.id,
            title=resume.title,
            template=resume.template,
            isPublic=resume.isPublic,
            fullName=personal.fullName if personal else None,
            originalFile=resume.originalFile,
            createdAt=resume.createdAt,
            updatedAt=resume.updatedAt,
        )


class ResumeSingleResponse(BaseModel):
    """Envelope response for single resume retrieval: { status, message, data }"""
    status: int = 200
    message: str = "Resume returned successfully"
    data: Optional[ResumeRead] = None

    model_config = pydantic.ConfigDict(from_attributes=True)


class ResumeListResponse(BaseModel):
    """Envelope response returned by GET /api/resumes

    Keeps a stable shape for the frontend: { status, message, count, data }
    where data is the list of resume summaries.
    """
    status: int = 200
    message: str = "Resumes returned successfully"
    count: int = 0
    data: List[ResumeSummary] = Field(default_factory=list)


class SharedOwner(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class SharedResumeRead(ResumeRead):
    owner: Optional[SharedOwner] = None


class SharedResumeResponse(BaseModel):
    status: int = 200
    message: str = "Resume returned successfully"
    data: Optional[SharedResumeRead] = None

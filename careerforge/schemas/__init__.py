from .resume import (
	SkillLevel,
	LanguageProficiency,
	ResumeTemplate,
	PersonalInfo,
	Education,
	Experience,
	Skill,
	Project,
	Certification,
	Language,
	OriginalFile,
	ResumeContent,
	ResumeBase,
	ResumeCreate,
	ResumeUpdate,
	ResumeRead,
	ResumeSummary,
)
from .documents import ResumeDoc, UserDoc

__all__ = [
	"SkillLevel",
	"LanguageProficiency",
	"ResumeTemplate",
	"PersonalInfo",
	"Education",
	"Experience",
	"Skill",
	"Project",
	"Certification",
	"Language",
	"OriginalFile",
	"ResumeContent",
	"ResumeBase",
	"ResumeCreate",
	"ResumeUpdate",
	"ResumeRead",
	"ResumeSummary",
	"ResumeDoc",
	"UserDoc",
]

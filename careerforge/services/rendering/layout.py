"""Format-agnostic resume layout.

``build_layout`` turns a resume into an ordered list of sections made of
styled text blocks. The PDF and DOCX renderers only translate these blocks
into their own primitives, so section order, suppression rules and the text
of every line are decided here exactly once.
"""
from __future__ import annotations

from typing import Callable, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from careerforge.schemas.resume import (
    Certification,
    Education,
    Experience,
    PersonalInfo,
    Project,
    ResumeContent,
    ResumeTemplate,
)
from careerforge.services.rendering import formatting as fmt

BlockKind = Literal["name", "contact", "links", "title", "subtitle", "meta", "body", "bullet", "link"]

TEMPLATE_ACCENTS = {
    ResumeTemplate.MODERN: "2563EB",
    ResumeTemplate.CLASSIC: "333333",
    ResumeTemplate.MINIMAL: "444444",
    ResumeTemplate.PROFESSIONAL: "1F3A5F",
    ResumeTemplate.CREATIVE: "7C3AED",
}


class Run(BaseModel):
    text: str
    bold: bool = False


class Block(BaseModel):
    kind: BlockKind
    runs: List[Run] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


class Section(BaseModel):
    key: str
    heading: str
    entries: List[List[Block]] = Field(default_factory=list)


class DocumentLayout(BaseModel):
    accent: str = TEMPLATE_ACCENTS[ResumeTemplate.MODERN]
    header: List[Block] = Field(default_factory=list)
    sections: List[Section] = Field(default_factory=list)

    def headings(self) -> List[str]:
        return [s.heading for s in self.sections]

    def lines(self) -> List[str]:
        """Every line of text in reading order (handy for tests and previews)."""
        out = [b.text for b in self.header]
        for section in self.sections:
            out.append(section.heading)
            for entry in section.entries:
                out.extend(b.text for b in entry)
        return out


def _block(kind: BlockKind, text: str, bold: bool = False) -> Block:
    return Block(kind=kind, runs=[Run(text=text, bold=bold)])


def header_blocks(info: Optional[PersonalInfo]) -> List[Block]:
    if info is None:
        return []

    blocks = []
    if info.fullName:
        blocks.append(_block("name", info.fullName, bold=True))

    contact = fmt.join_present([info.email, info.phone, info.address])
    if contact:
        blocks.append(_block("contact", contact))

    links = fmt.join_present([
        fmt.labelled("LinkedIn", info.linkedIn),
        fmt.labelled("Portfolio", info.portfolio),
        fmt.labelled("GitHub", info.github),
    ])
    if links:
        blocks.append(_block("links", links))
    return blocks


def experience_entry(exp: Experience) -> List[Block]:
    blocks = [Block(kind="title", runs=[Run(text=exp.position, bold=True), Run(text=f" at {exp.company}")])]

    subtitle = fmt.join_present([exp.location, fmt.format_date_range(exp.startDate, exp.endDate, exp.current)])
    if subtitle:
        blocks.append(_block("subtitle", subtitle))
    if exp.description:
        blocks.append(_block("body", exp.description))
    for achievement in exp.achievements:
        blocks.append(_block("bullet", fmt.bullet(achievement)))
    return blocks


def education_entry(edu: Education) -> List[Block]:
    degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
    blocks = [_block("title", edu.institution, bold=True), _block("body", degree)]

    subtitle = fmt.join_present([
        fmt.format_date_range(edu.startDate, edu.endDate),
        fmt.labelled("Grade", edu.grade),
    ])
    if subtitle:
        blocks.append(_block("subtitle", subtitle))
    if edu.description:
        blocks.append(_block("body", edu.description))
    return blocks


def project_entry(project: Project) -> List[Block]:
    blocks = [_block("title", project.name, bold=True)]
    if project.technologies:
        blocks.append(_block("meta", f"Technologies: {', '.join(project.technologies)}"))
    if project.description:
        blocks.append(_block("body", project.description))

    links = fmt.join_present([fmt.labelled("Demo", project.link), fmt.labelled("Code", project.github)])
    if links:
        blocks.append(_block("link", links))
    return blocks


def certification_entry(cert: Certification) -> List[Block]:
    runs = [Run(text=cert.name, bold=True)]
    if cert.issuer:
        runs.append(Run(text=f" - {cert.issuer}"))
    blocks = [Block(kind="title", runs=runs)]

    # expiryDate is stored but intentionally not printed
    issued = fmt.format_month_year(cert.date)
    if issued:
        blocks.append(_block("meta", issued))
    return blocks


def _summary(resume: ResumeContent) -> List[List[Block]]:
    summary = resume.personalInfo.summary if resume.personalInfo else None
    return [[_block("body", summary)]] if summary else []


def _experience(resume: ResumeContent) -> List[List[Block]]:
    return [experience_entry(e) for e in resume.experience]


def _education(resume: ResumeContent) -> List[List[Block]]:
    return [education_entry(e) for e in resume.education]


def _skills(resume: ResumeContent) -> List[List[Block]]:
    if not resume.skills:
        return []
    line = fmt.ITEM_SEPARATOR.join(fmt.rated_item(s.name, s.level) for s in resume.skills)
    return [[_block("body", line)]]


def _projects(resume: ResumeContent) -> List[List[Block]]:
    return [project_entry(p) for p in resume.projects]


def _certifications(resume: ResumeContent) -> List[List[Block]]:
    return [certification_entry(c) for c in resume.certifications]


def _languages(resume: ResumeContent) -> List[List[Block]]:
    if not resume.languages:
        return []
    line = fmt.ITEM_SEPARATOR.join(fmt.rated_item(lang.name, lang.proficiency) for lang in resume.languages)
    return [[_block("body", line)]]


SECTION_ORDER: Tuple[Tuple[str, str, Callable[[ResumeContent], List[List[Block]]]], ...] = (
    ("summary", "PROFESSIONAL SUMMARY", _summary),
    ("experience", "WORK EXPERIENCE", _experience),
    ("education", "EDUCATION", _education),
    ("skills", "SKILLS", _skills),
    ("projects", "PROJECTS", _projects),
    ("certifications", "CERTIFICATIONS", _certifications),
    ("languages", "LANGUAGES", _languages),
)


def build_layout(resume: ResumeContent) -> DocumentLayout:
    """Lay out a resume; sections without content are left out entirely."""
    sections = []
    for key, heading, build_entries in SECTION_ORDER:
        entries = build_entries(resume)
        if entries:
            sections.append(Section(key=key, heading=heading, entries=entries))

    return DocumentLayout(
        accent=TEMPLATE_ACCENTS.get(resume.template, TEMPLATE_ACCENTS[ResumeTemplate.MODERN]),
        header=header_blocks(resume.personalInfo),
        sections=sections,
    )

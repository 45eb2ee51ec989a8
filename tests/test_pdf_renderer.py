"""
Tests for PDF export (WeasyPrint), read back with pypdf
"""
from io import BytesIO

from pypdf import PdfReader

from careerforge.schemas.resume import ResumeContent
from careerforge.services.rendering.layout import build_layout
from careerforge.services.rendering.pdf_renderer import render_html, render_pdf

from conftest import FULL_RESUME


def _pdf_text(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def test_render_pdf_produces_pdf_bytes():
    content = render_pdf(ResumeContent(**FULL_RESUME))
    assert content.startswith(b"%PDF")
    assert len(PdfReader(BytesIO(content)).pages) >= 1


def test_pdf_contains_sections_in_order():
    text = _pdf_text(render_pdf(ResumeContent(**FULL_RESUME)))
    positions = [text.find(h) for h in ("PROFESSIONAL SUMMARY", "WORK EXPERIENCE", "EDUCATION", "LANGUAGES")]
    assert all(p >= 0 for p in positions)
    assert positions == sorted(positions)
    assert "Jane Doe" in text


def test_pdf_suppresses_empty_experience():
    resume = ResumeContent(title="No jobs", personalInfo={"fullName": "Sam Lee"}, skills=[{"name": "SQL"}])
    text = _pdf_text(render_pdf(resume))
    assert "WORK EXPERIENCE" not in text
    assert "SKILLS" in text


def test_html_marks_bold_runs_and_escapes_text():
    resume = ResumeContent(
        title="R",
        experience=[{"company": "<Acme & Co>", "position": "Engineer"}],
    )
    html = render_html(build_layout(resume), title="R")
    assert "<strong>Engineer</strong> at &lt;Acme &amp; Co&gt;" in html
    assert '<section class="section section-experience">' in html

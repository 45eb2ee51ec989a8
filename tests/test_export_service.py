"""
Tests for export format mapping, download filenames and render failure handling
"""
from unittest.mock import patch

import pytest

from careerforge.core.errors import RenderError
from careerforge.schemas.resume import ResumeContent
from careerforge.services import export_service
from careerforge.services.export_service import (
    EXPORTERS,
    ExportFormat,
    Exporter,
    export_filename,
    export_resume,
    render_resume,
    sanitize_title,
)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_sanitize_title_replaces_every_non_alphanumeric():
    assert sanitize_title("Jane's Resume 2024") == "Jane_s_Resume_2024"
    assert sanitize_title("Résumé-v2.final") == "R_sum__v2_final"
    assert sanitize_title("") == ""


def test_export_filename():
    assert export_filename("My CV", ExportFormat.PDF) == "My_CV_resume.pdf"
    assert export_filename("My CV", ExportFormat.DOCX) == "My_CV_resume.docx"


def test_media_types():
    assert EXPORTERS[ExportFormat.PDF].media_type == "application/pdf"
    assert EXPORTERS[ExportFormat.DOCX].media_type == DOCX_MIME


def test_render_resume_docx_result():
    result = render_resume(ResumeContent(title="Data Eng"), ExportFormat.DOCX)
    assert result.media_type == DOCX_MIME
    assert result.content_disposition == 'attachment; filename="Data_Eng_resume.docx"'
    assert result.content[:2] == b"PK"


def _broken(resume):
    raise ValueError("font cache exploded")


def test_render_failure_becomes_render_error():
    broken = dict(EXPORTERS)
    broken[ExportFormat.PDF] = Exporter(_broken, "application/pdf", "pdf")
    with patch.dict(export_service.EXPORTERS, broken):
        with pytest.raises(RenderError) as exc_info:
            render_resume(ResumeContent(title="R"), ExportFormat.PDF)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to generate PDF"
    assert "font cache" not in exc_info.value.detail


@pytest.mark.asyncio
async def test_export_resume_runs_renderer_off_loop():
    result = await export_resume(ResumeContent(title="Async"), ExportFormat.DOCX)
    assert result.filename == "Async_resume.docx"

"""
Export Service

Maps an export format to its renderer, content type and download filename,
and converts renderer failures into a single server-side error.
"""
import logging
import re
from enum import Enum
from typing import Callable, Dict, NamedTuple

from starlette.concurrency import run_in_threadpool

from careerforge.core.errors import RenderError
from careerforge.schemas.resume import ResumeContent
from careerforge.services.rendering.docx_renderer import render_docx
from careerforge.services.rendering.pdf_renderer import render_pdf

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


class ExportFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"


class Exporter(NamedTuple):
    render: Callable[[ResumeContent], bytes]
    media_type: str
    extension: str


EXPORTERS: Dict[ExportFormat, Exporter] = {
    ExportFormat.PDF: Exporter(render_pdf, "application/pdf", "pdf"),
    ExportFormat.DOCX: Exporter(
        render_docx,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "docx",
    ),
}


class ExportResult(NamedTuple):
    content: bytes
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def sanitize_title(title: str) -> str:
    """Replace every character outside [A-Za-z0-9] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", title or "")


def export_filename(title: str, export_format: ExportFormat) -> str:
    return f"{sanitize_title(title)}_resume.{EXPORTERS[export_format].extension}"


def render_resume(resume: ResumeContent, export_format: ExportFormat) -> ExportResult:
    """Render synchronously; any library failure becomes a RenderError."""
    exporter = EXPORTERS[export_format]
    try:
        content = exporter.render(resume)
    except Exception as e:
        logger.exception("Failed to render %s export: %s", export_format.value, e)
        raise RenderError(f"Failed to generate {export_format.value.upper()}") from e

    return ExportResult(
        content=content,
        media_type=exporter.media_type,
        filename=export_filename(getattr(resume, "title", ""), export_format),
    )


async def export_resume(resume: ResumeContent, export_format: ExportFormat) -> ExportResult:
    # rendering is CPU bound; keep it off the event loop
    return await run_in_threadpool(render_resume, resume, export_format)

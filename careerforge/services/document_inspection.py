import os
from typing import Optional

import docx
from pypdf import PdfReader

PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RESUME_TYPES = {
    ".pdf": PDF_MIME,
    ".doc": DOC_MIME,
    ".docx": DOCX_MIME,
}

IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}


def is_allowed_resume(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Only PDF and Word documents, checked by extension and declared MIME type."""
    ext = os.path.splitext(filename or "")[1].lower()
    return ext in RESUME_TYPES and content_type in RESUME_TYPES.values()


def is_allowed_image(filename: Optional[str], content_type: Optional[str]) -> bool:
    ext = os.path.splitext(filename or "")[1].lower()
    return ext in IMAGE_EXTENSIONS and bool(content_type) and content_type.startswith("image/")


def is_readable_document(path: str) -> bool:
    """
    Make sure an uploaded resume actually opens as the format it claims.
    Legacy .doc files have no parser here and are accepted as-is.
    """
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == ".pdf":
            reader = PdfReader(path)
            return len(reader.pages) > 0
        if ext == ".docx":
            docx.Document(path)
            return True
    except Exception:
        return False
    return ext == ".doc"

import logging
import os
import tempfile
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from careerforge.core.config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadTooLarge(Exception):
    pass


def configure_cloudinary():
    """Configures the Cloudinary client with credentials from settings.

    Keys: CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET
    """
    values = {
        "CLOUDINARY_CLOUD_NAME": settings.CLOUDINARY_CLOUD_NAME,
        "CLOUDINARY_API_KEY": settings.CLOUDINARY_API_KEY,
        "CLOUDINARY_API_SECRET": settings.CLOUDINARY_API_SECRET,
    }
    missing = [k for k, v in values.items() if not v]
    if missing:
        logger.warning("Cloudinary config missing vars: %s. Uploads will likely fail.", missing)

    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def upload_to_cloudinary(file_path: str, folder: str = "careerforge") -> Optional[Dict[str, str]]:
    """Uploads a file to Cloudinary and returns {url, public_id}.

    Returns None on failure (callers should handle gracefully).
    """
    try:
        configure_cloudinary()
        upload_result = cloudinary.uploader.upload(
            file_path,
            folder=folder,
            public_id=uuid.uuid4().hex,
            resource_type="auto",
        )
    except Exception as e:
        logger.error("Cloudinary upload failed: %s", e)
        return None

    logger.info("File uploaded to Cloudinary: %s", upload_result.get("public_id"))
    return {"url": upload_result.get("secure_url"), "public_id": upload_result.get("public_id")}


def delete_from_cloudinary(public_id: str) -> bool:
    """Deletes a stored file; failures are logged and reported as False."""
    try:
        configure_cloudinary()
        result = cloudinary.uploader.destroy(public_id)
    except Exception as e:
        logger.error("Cloudinary delete failed for %s: %s", public_id, e)
        return False
    return result.get("result") == "ok"


async def upload_file(file_path: str, folder: str) -> Optional[Dict[str, str]]:
    return await run_in_threadpool(upload_to_cloudinary, file_path, folder)


async def delete_file(public_id: Optional[str]) -> bool:
    if not public_id:
        return False
    return await run_in_threadpool(delete_from_cloudinary, public_id)


async def save_upload_to_temp(upload: UploadFile, max_bytes: int) -> str:
    """Stream an upload into UPLOAD_DIR and return the temporary path."""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    suffix = os.path.splitext(upload.filename or "")[1].lower()
    fd, path = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=settings.UPLOAD_DIR)

    written = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise UploadTooLarge(f"File exceeds {max_bytes // (1024 * 1024)}MB limit")
                out.write(chunk)
    except BaseException:
        remove_file(path)
        raise
    return path


def remove_file(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)


@contextmanager
def temporary_file(path: str) -> Iterator[str]:
    """Guarantee the local copy is removed whether forwarding succeeds or not."""
    try:
        yield path
    finally:
        remove_file(path)

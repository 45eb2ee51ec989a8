from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Response, UploadFile, status

from careerforge.api.deps import get_current_user, get_notifier, get_optional_user, get_resume_or_404
from careerforge.core.config import settings
from careerforge.core.errors import ApiError, BadRequest, NotFound
from careerforge.crud import crud_resume, crud_user
from careerforge.schemas.documents import ResumeDoc, UserDoc
from careerforge.schemas.resume import (
    OriginalFile,
    ResumeCreate,
    ResumeListResponse,
    ResumeRead,
    ResumeSingleResponse,
    ResumeSummary,
    ResumeTemplate,
    ResumeUpdate,
    SharedOwner,
    SharedResumeRead,
    SharedResumeResponse,
    TemplateUpdate,
)
from careerforge.schemas.user import MessageResponse
from careerforge.services import access_control, share_service
from careerforge.services.document_inspection import is_allowed_resume, is_readable_document
from careerforge.services.export_service import ExportFormat, export_resume
from careerforge.services.notification_service import EmailNotifier
from careerforge.tools import file_uploader

router = APIRouter()

SECTION_FIELDS = ("personalInfo", "education", "experience", "skills", "projects", "certifications", "languages")


def _single(resume: ResumeDoc, message: str, status_code: int = 200) -> ResumeSingleResponse:
    return ResumeSingleResponse(status=status_code, message=message, data=ResumeRead.model_validate(resume))


@router.get("/shared/{token}", response_model=SharedResumeResponse)
async def read_shared_resume(token: str):
    """Public read of a resume through an active share token."""
    resume = await share_service.validate(token)
    if resume is None:
        raise NotFound("Resume not found or share link expired")

    data = SharedResumeRead.model_validate(resume)
    owner = await crud_user.get_user(resume.user)
    if owner is not None:
        data.owner = SharedOwner(name=owner.name, email=owner.email)
    return SharedResumeResponse(data=data)


@router.get("/", response_model=ResumeListResponse)
async def read_resumes(skip: int = 0, limit: int = 100, user: UserDoc = Depends(get_current_user)):
    resumes = await crud_resume.get_resumes_for_user(user.id, skip=skip, limit=limit)
    summaries = [ResumeSummary.from_resume(r) for r in resumes]
    return ResumeListResponse(count=len(summaries), data=summaries)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=ResumeSingleResponse)
async def create_resume(
    payload: ResumeCreate,
    background_tasks: BackgroundTasks,
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    resume = await crud_resume.create_resume(user.id, payload)
    background_tasks.add_task(notifier.resume_created, user, resume.title)
    return _single(resume, "Resume created successfully", status.HTTP_201_CREATED)


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=ResumeSingleResponse)
async def upload_resume(
    background_tasks: BackgroundTasks,
    resume: UploadFile = File(...),
    title: Optional[str] = Form(None),
    template: Optional[ResumeTemplate] = Form(None),
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    """
    Store an existing resume document (PDF/DOC/DOCX, 10MB max).

    The file is forwarded to Cloudinary; the local copy is always removed.
    """
    if not is_allowed_resume(resume.filename, resume.content_type):
        raise BadRequest("Only PDF and Word documents are allowed!")

    try:
        path = await file_uploader.save_upload_to_temp(resume, settings.MAX_RESUME_UPLOAD_BYTES)
    except file_uploader.UploadTooLarge as e:
        raise BadRequest(str(e))

    with file_uploader.temporary_file(path):
        if not is_readable_document(path):
            raise BadRequest("Uploaded file could not be read as a PDF or Word document")
        uploaded = await file_uploader.upload_file(path, "resumes")

    if uploaded is None:
        raise ApiError("Failed to upload file")

    resume_title = (title or "").strip() or f"Uploaded Resume - {datetime.now():%m/%d/%Y}"
    doc = await crud_resume.create_uploaded_resume(
        user.id,
        title=resume_title[:100],
        template=template or ResumeTemplate.MODERN,
        original_file=OriginalFile(url=uploaded["url"], storageId=uploaded["public_id"], filename=resume.filename),
    )
    background_tasks.add_task(notifier.resume_created, user, doc.title)
    return _single(doc, "Resume uploaded successfully", status.HTTP_201_CREATED)


@router.get("/{resume_id}", response_model=ResumeSingleResponse)
async def read_resume(resume_id: str, user: Optional[UserDoc] = Depends(get_optional_user)):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_can_read(resume, user)
    return _single(resume, "Resume returned successfully")


@router.put("/{resume_id}", response_model=ResumeSingleResponse)
async def update_resume(
    resume_id: str,
    payload: ResumeUpdate,
    background_tasks: BackgroundTasks,
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "update")

    changes = {
        field: getattr(payload, field)
        for field in payload.model_fields_set
        if getattr(payload, field) is not None
    }
    resume = await crud_resume.update_resume(resume, changes)

    updated_sections = [f for f in SECTION_FIELDS if f in changes]
    background_tasks.add_task(notifier.resume_updated, user, resume.title, updated_sections)
    return _single(resume, "Resume updated successfully")


@router.delete("/{resume_id}", response_model=MessageResponse)
async def delete_resume(
    resume_id: str,
    background_tasks: BackgroundTasks,
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "delete")

    if resume.originalFile and resume.originalFile.storageId:
        await file_uploader.delete_file(resume.originalFile.storageId)

    title = resume.title
    await crud_resume.delete_resume(resume)
    background_tasks.add_task(notifier.resume_deleted, user, title)
    return MessageResponse(message="Resume deleted successfully")


async def _download(resume_id: str, user: Optional[UserDoc], export_format: ExportFormat) -> Response:
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_can_read(resume, user)

    result = await export_resume(resume, export_format)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": result.content_disposition},
    )


@router.get("/{resume_id}/pdf")
async def download_resume_pdf(resume_id: str, user: Optional[UserDoc] = Depends(get_optional_user)):
    return await _download(resume_id, user, ExportFormat.PDF)


@router.get("/{resume_id}/docx")
async def download_resume_docx(resume_id: str, user: Optional[UserDoc] = Depends(get_optional_user)):
    return await _download(resume_id, user, ExportFormat.DOCX)


@router.put("/{resume_id}/template", response_model=MessageResponse)
async def update_template(
    resume_id: str,
    payload: TemplateUpdate,
    background_tasks: BackgroundTasks,
    user: UserDoc = Depends(get_current_user),
    notifier: EmailNotifier = Depends(get_notifier),
):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "update")

    resume = await crud_resume.update_resume(resume, {"template": payload.template})
    background_tasks.add_task(notifier.resume_updated, user, resume.title, ["template"])
    return MessageResponse(message="Template updated successfully", data={"template": payload.template.value})


@router.post("/{resume_id}/share", response_model=MessageResponse)
async def generate_share_link(resume_id: str, user: UserDoc = Depends(get_current_user)):
    resume = await get_resume_or_404(resume_id)
    access_control.ensure_owner(resume, user, "share")

    token, created = share_service.ensure(resume)
    if created:
        resume = await crud_resume.save_resume(resume)

    return MessageResponse(
        message="Share link generated successfully",
        data={
            "shareToken": token,
            "shareUrl": share_service.build_share_url(token),
            "expiresAt": resume.shareExpiry,
        },
    )

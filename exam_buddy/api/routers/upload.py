import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from exam_buddy.api.dependencies import get_intake_service
from exam_buddy.models.schema import LinkRequest, SubmitResponse
from exam_buddy.services.intake_service import IntakeService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/pdf", response_model=SubmitResponse)
async def upload_pdf(
        pdf: Optional[UploadFile] = File(None),
        session_id: Optional[str] = Form(None),
        service: IntakeService = Depends(get_intake_service),
) -> SubmitResponse:
    """
    Store an uploaded PDF and queue it for ingestion.
    Returns as soon as the job is queued; poll /jobs/{job_id} for progress.
    """
    contents = await pdf.read() if pdf is not None else None

    result = await run_in_threadpool(
        service.submit_file,
        contents,
        pdf.filename if pdf is not None else None,
        pdf.content_type if pdf is not None else None,
        session_id,
    )
    return SubmitResponse(**result)


@router.post("/ytlink", response_model=SubmitResponse)
def upload_video_link(
        request: Optional[LinkRequest] = Body(None),
        service: IntakeService = Depends(get_intake_service),
) -> SubmitResponse:
    """Queue the transcript of a video link for ingestion."""
    request = request or LinkRequest()
    result = service.submit_video_link(request.link, session_id=request.session_id)
    return SubmitResponse(**result)


@router.post("/githubrepo", response_model=SubmitResponse)
def upload_repo_link(
        request: Optional[LinkRequest] = Body(None),
        service: IntakeService = Depends(get_intake_service),
) -> SubmitResponse:
    """Queue the files of a code repository for ingestion."""
    request = request or LinkRequest()
    result = service.submit_repo_link(request.link, session_id=request.session_id)
    return SubmitResponse(**result)

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from exam_buddy.api.dependencies import get_job_tracker_dependency
from exam_buddy.core.background.job_tracker import JobTracker
from exam_buddy.core.exceptions import NotFound
from exam_buddy.models.schema import JobRecordResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{job_id}", response_model=JobRecordResponse)
def get_job_status(
        job_id: str,
        job_tracker: JobTracker = Depends(get_job_tracker_dependency),
) -> JobRecordResponse:
    """Status of an ingestion job: pending, processing, completed or failed."""
    job_data = job_tracker.get_job(job_id)
    if job_data is None:
        raise NotFound(f"Job {job_id} not found")
    return JobRecordResponse(**job_data)


@router.get("", response_model=List[JobRecordResponse])
def get_all_jobs(
        limit: int = Query(100, ge=1, le=1000),
        job_type: Optional[str] = Query(None),
        job_tracker: JobTracker = Depends(get_job_tracker_dependency),
) -> List[JobRecordResponse]:
    """Most recent jobs first, optionally filtered by kind."""
    return [JobRecordResponse(**job) for job in job_tracker.get_all_jobs(limit=limit, job_type=job_type)]


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
        job_id: str,
        job_tracker: JobTracker = Depends(get_job_tracker_dependency),
) -> MessageResponse:
    """Forget a job record. Does not touch the ingested content."""
    if not job_tracker.delete_job(job_id):
        raise NotFound(f"Job {job_id} not found")
    return MessageResponse(message=f"Job {job_id} deleted")

"""
Ingestion actors, one per lane.

Each actor rebuilds the job from its payload and runs it through the
ingestion pipeline. Errors propagate so the broker's Retries middleware
applies; once retries are exhausted the message is dead-lettered and
``IngestionFailureMiddleware`` marks the job failed.
"""

import logging
from typing import Any, Dict, Optional

import dramatiq

# Declares the broker before any actor below binds to it
from exam_buddy.core.background.common import broker  # noqa: F401
from exam_buddy.config.settings import settings
from exam_buddy.core.background.job_tracker import get_job_tracker
from exam_buddy.core.background.models import get_vector_store
from exam_buddy.core.ingestion.pipeline import IngestionPipeline
from exam_buddy.core.orchestration.queue_manager import QueueNames
from exam_buddy.models.enums import JobKind
from exam_buddy.models.jobs import parse_job
from exam_buddy.utils.logging import get_job_logger

logger = logging.getLogger(__name__)

ACTOR_OPTIONS = {
    "max_retries": settings.ingestion_max_retries,
    "min_backoff": settings.ingestion_min_backoff_ms,
    "max_backoff": settings.ingestion_max_backoff_ms,
    "time_limit": settings.ingestion_time_limit_ms,
}

_pipeline: Optional[IngestionPipeline] = None


def get_pipeline() -> IngestionPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = IngestionPipeline(vector_store_provider=get_vector_store)
    return _pipeline


def run_ingestion(job_data: Dict[str, Any], lane: JobKind) -> Dict[str, Any]:
    """Process one job payload delivered on ``lane``. Pure work function."""
    job = parse_job(job_data)
    if job.kind != lane:
        raise ValueError(f"Job {job.job_id} of kind {job.kind} was delivered to the {lane.value} lane")

    job_logger = get_job_logger(logger, job.job_id, job.kind)
    tracker = get_job_tracker()

    tracker.mark_processing(job.job_id)
    job_logger.info(f"Processing {job.source} into {job.collection_name}")

    try:
        result = get_pipeline().process(job)
    except Exception as e:
        job_logger.error(f"Ingestion attempt failed: {str(e)}")
        tracker.record_attempt_error(job.job_id, str(e))
        raise

    tracker.mark_completed(job.job_id, result)
    job_logger.info(f"Completed: {result['chunk_count']} chunks from {result['document_count']} documents")
    return result


@dramatiq.actor(queue_name=QueueNames.FILE_UPLOAD.value, **ACTOR_OPTIONS)
def ingest_file_job(job_data: Dict[str, Any]) -> None:
    """Load a stored PDF upload page by page."""
    run_ingestion(job_data, JobKind.FILE)


@dramatiq.actor(queue_name=QueueNames.VIDEO_LINK.value, **ACTOR_OPTIONS)
def ingest_video_link_job(job_data: Dict[str, Any]) -> None:
    """Load the transcript behind a video link."""
    run_ingestion(job_data, JobKind.VIDEO_LINK)


@dramatiq.actor(queue_name=QueueNames.REPO.value, **ACTOR_OPTIONS)
def ingest_repo_job(job_data: Dict[str, Any]) -> None:
    """Load the files of a code repository."""
    run_ingestion(job_data, JobKind.REPO)


LANE_ACTORS = {
    JobKind.FILE: ingest_file_job,
    JobKind.VIDEO_LINK: ingest_video_link_job,
    JobKind.REPO: ingest_repo_job,
}


def get_lane_actor(kind: str) -> dramatiq.Actor:
    """Get the actor that consumes jobs of ``kind``."""
    try:
        return LANE_ACTORS[JobKind(kind)]
    except ValueError:
        raise ValueError(f"Unknown job kind: '{kind}'") from None

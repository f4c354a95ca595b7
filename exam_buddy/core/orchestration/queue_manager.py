"""
Queue lanes and job dispatch.

Each upload kind has its own queue, so a slow lane (a large repository, a
long transcript) never holds up the others.
"""

import logging
from enum import Enum
from typing import List

from exam_buddy.models.enums import JobKind
from exam_buddy.models.jobs import UploadJob

logger = logging.getLogger(__name__)


class QueueNames(Enum):
    """Queue names, one per ingestion lane."""

    FILE_UPLOAD = "file_upload_queue"
    VIDEO_LINK = "video_link_queue"
    REPO = "repo_queue"

    @classmethod
    def get_all_queue_names(cls) -> List[str]:
        """Get list of all queue names."""
        return [queue.value for queue in cls]

    @classmethod
    def for_kind(cls, kind: str) -> "QueueNames":
        """Get the lane that processes a job kind."""
        if kind == JobKind.FILE:
            return cls.FILE_UPLOAD
        elif kind == JobKind.VIDEO_LINK:
            return cls.VIDEO_LINK
        elif kind == JobKind.REPO:
            return cls.REPO
        raise ValueError(f"Unknown job kind: '{kind}'")


def enqueue_job(job: UploadJob) -> str:
    """
    Send a job to the actor of its lane.

    Returns:
        The broker message id

    Raises:
        Exception: Any broker error, unchanged
    """
    # Import here to avoid circular imports
    from exam_buddy.core.background.actors.ingestion import get_lane_actor

    actor = get_lane_actor(job.kind)
    message = actor.send(job.model_dump(mode="json"))
    logger.info(f"Enqueued job {job.job_id} on {actor.queue_name} (message {message.message_id})")
    return message.message_id

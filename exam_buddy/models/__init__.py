"""
Models package.

Re-exports the enums, upload jobs and API schemas.
"""

from .enums import DocumentSource, JobKind, JobStatus
from .jobs import BaseJob, FileJob, RepoJob, UploadJob, VideoLinkJob, parse_job
from .schema import (
    ChatResponse,
    ChunkResponse,
    ErrorResponse,
    JobRecordResponse,
    LinkRequest,
    MessageResponse,
    SubmitResponse,
)

__all__ = [
    # Enums
    "DocumentSource",
    "JobKind",
    "JobStatus",

    # Jobs
    "BaseJob",
    "FileJob",
    "RepoJob",
    "UploadJob",
    "VideoLinkJob",
    "parse_job",

    # API schemas
    "ChatResponse",
    "ChunkResponse",
    "ErrorResponse",
    "JobRecordResponse",
    "LinkRequest",
    "MessageResponse",
    "SubmitResponse",
]

from enum import Enum


class JobKind(str, Enum):
    """Ingestion lanes. Each kind has its own queue and actor."""
    FILE = "file"
    VIDEO_LINK = "video_link"
    REPO = "repo"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentSource(str, Enum):
    PDF = "pdf"
    YOUTUBE = "youtube"
    GITHUB = "github"

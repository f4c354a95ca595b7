"""
Error taxonomy shared by the API and the ingestion workers.

Every error raised towards a client carries the HTTP status it maps to; the
API turns it into an ``{"error": message}`` body.
"""

from typing import Optional


class ExamBuddyError(Exception):
    """Base error class."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequest(ExamBuddyError):
    """Malformed or missing client input."""
    status_code = 400


class NotFound(ExamBuddyError):
    """Unknown resource, e.g. a job id that was never issued."""
    status_code = 404


class UpstreamError(ExamBuddyError):
    """Embedding service, vector store or chat model failed while answering."""
    status_code = 502

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class InternalError(ExamBuddyError):
    """Transport failure to the vector store or the queue."""
    status_code = 500

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class IngestionFailure(ExamBuddyError):
    """A worker could not turn a job into chunks. Never surfaced to the submitter."""

    def __init__(self, message: str, job_id: Optional[str] = None):
        super().__init__(message)
        self.job_id = job_id

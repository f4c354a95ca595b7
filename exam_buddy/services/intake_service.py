import os
import uuid
import logging
from typing import Any, Callable, Dict, List, Optional

from exam_buddy.config.settings import settings
from exam_buddy.core.background.job_tracker import JobTracker
from exam_buddy.core.exceptions import BadRequest, InternalError
from exam_buddy.core.orchestration.queue_manager import enqueue_job
from exam_buddy.core.vectorstore import QdrantStore
from exam_buddy.models.jobs import FileJob, RepoJob, UploadJob, VideoLinkJob
from exam_buddy.utils.helpers import generate_upload_filename, resolve_collection_name, safe_basename

logger = logging.getLogger(__name__)


class IntakeService:
    """
    Accepts uploads and links, records a job and enqueues it on its lane.

    Nothing here waits for ingestion: a submit returns as soon as the job is
    on the queue, and the job record tells the client when it is searchable.
    """

    def __init__(
        self,
        job_tracker_provider: Callable[[], JobTracker],
        vector_store_provider: Callable[[str], QdrantStore],
        enqueue: Callable[[UploadJob], str] = enqueue_job,
        upload_dir: Optional[str] = None,
        accepted_upload_types: Optional[List[str]] = None,
    ):
        self.job_tracker_provider = job_tracker_provider
        self.vector_store_provider = vector_store_provider
        self.enqueue = enqueue
        self.upload_dir = upload_dir or settings.upload_dir
        self.accepted_upload_types = accepted_upload_types or settings.accepted_upload_type_list

    @property
    def job_tracker(self) -> JobTracker:
        return self.job_tracker_provider()

    def _submit(self, job: UploadJob, metadata: Dict[str, Any], message: str,
                session_id: Optional[str]) -> Dict[str, Any]:
        try:
            self.job_tracker.create_job(job_id=job.job_id, job_type=job.kind, metadata=metadata)
        except Exception as e:
            logger.error(f"Error recording job {job.job_id}: {str(e)}")
            raise InternalError("Could not record the upload job", original=e)

        try:
            self.enqueue(job)
        except Exception as e:
            logger.error(f"Error enqueuing job {job.job_id}: {str(e)}")
            self.job_tracker.mark_failed(job.job_id, error=f"Enqueue failed: {str(e)}")
            raise InternalError("Could not queue the upload for processing", original=e)

        return {"message": message, "job_id": job.job_id, "session_id": session_id}

    def submit_file(self, file_bytes: Optional[bytes], filename: Optional[str],
                    content_type: Optional[str], session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Store an uploaded file and enqueue one file job for it.

        Raises:
            BadRequest: No file, an empty file or a content type that is not accepted
            InternalError: The job could not be enqueued
        """
        if file_bytes is None:
            raise BadRequest("No file uploaded: send the PDF in the 'pdf' form field")

        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type not in self.accepted_upload_types:
            raise BadRequest(
                f"Unsupported file type '{content_type}'. Accepted types: {', '.join(self.accepted_upload_types)}"
            )

        if len(file_bytes) == 0:
            raise BadRequest("Uploaded file is empty")

        collection_name = resolve_collection_name(session_id)

        os.makedirs(self.upload_dir, exist_ok=True)
        stored_name = generate_upload_filename(filename)
        storage_path = os.path.abspath(os.path.join(self.upload_dir, stored_name))
        with open(storage_path, "wb") as f:
            f.write(file_bytes)

        logger.info(f"Stored upload {filename} as {storage_path} ({len(file_bytes)} bytes)")

        job = FileJob(
            job_id=str(uuid.uuid4()),
            collection_name=collection_name,
            filename=safe_basename(filename),
            source_directory=os.path.abspath(self.upload_dir),
            storage_path=storage_path,
        )
        try:
            return self._submit(
                job,
                metadata={"filename": job.filename, "storage_path": storage_path, "collection_name": collection_name},
                message="File uploaded successfully",
                session_id=session_id,
            )
        except InternalError:
            # No job will ever read the stored copy
            os.remove(storage_path)
            logger.info(f"Removed orphaned upload {storage_path}")
            raise

    @staticmethod
    def _require_link(url: Optional[str]) -> str:
        if url is None or not url.strip():
            raise BadRequest("link must not be empty")
        return url.strip()

    def submit_video_link(self, url: Optional[str], session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Enqueue one video-link job.

        Raises:
            BadRequest: If the link is missing or blank
        """
        url = self._require_link(url)
        job = VideoLinkJob(job_id=str(uuid.uuid4()), collection_name=resolve_collection_name(session_id), url=url)
        return self._submit(
            job,
            metadata={"url": url, "collection_name": job.collection_name},
            message="Video link submitted successfully",
            session_id=session_id,
        )

    def submit_repo_link(self, url: Optional[str], session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Enqueue one repository job.

        Raises:
            BadRequest: If the link is missing or blank
        """
        url = self._require_link(url)
        job = RepoJob(job_id=str(uuid.uuid4()), collection_name=resolve_collection_name(session_id), url=url)
        return self._submit(
            job,
            metadata={"url": url, "collection_name": job.collection_name},
            message="Repository link submitted successfully",
            session_id=session_id,
        )

    def reset_collection(self, session_id: Optional[str] = None) -> bool:
        """
        Delete the collection of a session (the shared collection by default).

        Returns:
            True if a collection was deleted, False if there was none

        Raises:
            InternalError: If the vector store could not be reached
        """
        collection_name = resolve_collection_name(session_id)
        try:
            deleted = self.vector_store_provider(collection_name).delete_collection()
        except Exception as e:
            logger.error(f"Error deleting collection {collection_name}: {str(e)}")
            raise InternalError(f"Could not delete collection {collection_name}", original=e)

        if not deleted:
            logger.info(f"Collection {collection_name} did not exist, nothing to delete")
        return deleted

import json
import time
import logging
from typing import Any, Dict, List, Optional

import redis

from exam_buddy.config.settings import settings
from exam_buddy.models.enums import JobStatus

logger = logging.getLogger(__name__)

FINISHED_STATUSES = (JobStatus.COMPLETED.value, JobStatus.FAILED.value)


class JobTracker:
    """
    Status records for ingestion jobs, one JSON document per job in a Redis hash.

    Lets a client poll whether its upload is searchable yet.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.job_key = "exam_buddy:jobs"

    def create_job(self, job_id: str, job_type: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new pending job record."""
        now = time.time()
        job_data = {
            "job_id": job_id,
            "job_type": job_type,
            "status": JobStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
            "attempts": 0,
            "metadata": metadata,
            "result": None,
            "error": None,
        }

        self.redis.hset(self.job_key, job_id, json.dumps(job_data))
        logger.info(f"Created job {job_id} ({job_type})")
        return job_data

    def update_job_status(self, job_id: str, status: str, result: Optional[Dict[str, Any]] = None,
                          error: Optional[str] = None, new_attempt: bool = False) -> None:
        """Update job status, and optionally its result or last error."""
        job_data = self.get_job(job_id)
        if job_data is None:
            logger.warning(f"Job {job_id} not found")
            return

        job_data["status"] = status
        job_data["updated_at"] = time.time()

        if new_attempt:
            job_data["attempts"] = job_data.get("attempts", 0) + 1

        if result is not None:
            job_data["result"] = result

        if error is not None:
            job_data["error"] = str(error)

        self.redis.hset(self.job_key, job_id, json.dumps(job_data))
        logger.info(f"Updated job {job_id} status to {status}")

    def mark_processing(self, job_id: str) -> None:
        self.update_job_status(job_id, JobStatus.PROCESSING.value, new_attempt=True)

    def mark_completed(self, job_id: str, result: Dict[str, Any]) -> None:
        self.update_job_status(job_id, JobStatus.COMPLETED.value, result=result)

    def mark_failed(self, job_id: str, error: Optional[str] = None) -> None:
        self.update_job_status(job_id, JobStatus.FAILED.value, error=error)

    def record_attempt_error(self, job_id: str, error: str) -> None:
        """Store the error of a failed attempt; the job stays in processing until retries run out."""
        self.update_job_status(job_id, JobStatus.PROCESSING.value, error=error)

    def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Get job information by ID."""
        job_data_json = self.redis.hget(self.job_key, job_id)
        if not job_data_json:
            return None
        return json.loads(job_data_json)

    def get_all_jobs(self, limit: int = 100, job_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get all jobs, newest first, optionally filtered by type."""
        jobs = []
        for _, job_data_json in self.redis.hgetall(self.job_key).items():
            job_data = json.loads(job_data_json)
            if job_type and job_data.get("job_type") != job_type:
                continue
            jobs.append(job_data)

        jobs.sort(key=lambda x: x.get("created_at", 0), reverse=True)
        return jobs[:limit]

    def delete_job(self, job_id: str) -> bool:
        return self.redis.hdel(self.job_key, job_id) > 0

    def count_jobs_by_status(self) -> Dict[str, int]:
        """Count jobs by status."""
        status_counts = {status.value: 0 for status in JobStatus}
        all_jobs = self.redis.hgetall(self.job_key)
        status_counts["total"] = len(all_jobs)

        for _, job_data_json in all_jobs.items():
            status = json.loads(job_data_json).get("status")
            if status in status_counts:
                status_counts[status] += 1

        return status_counts

    def cleanup_old_jobs(self, retention_days: int = 7) -> int:
        """Delete finished jobs created before the retention period."""
        cutoff_time = time.time() - (retention_days * 24 * 60 * 60)
        deleted_count = 0

        for job_id, job_data_json in self.redis.hgetall(self.job_key).items():
            job_data = json.loads(job_data_json)
            if job_data.get("created_at", 0) < cutoff_time and job_data.get("status") in FINISHED_STATUSES:
                self.redis.hdel(self.job_key, job_id)
                deleted_count += 1

        logger.info(f"Old job cleanup completed: deleted {deleted_count} jobs")
        return deleted_count


_job_tracker: Optional[JobTracker] = None


def init_redis_client() -> redis.Redis:
    """Create a Redis client for job records and check the connection."""
    redis_kwargs = {
        "host": settings.redis_host,
        "port": settings.redis_port,
        "decode_responses": True,
        "socket_connect_timeout": 5,
        "socket_timeout": 5,
        "retry_on_timeout": True,
    }
    if settings.redis_password:
        redis_kwargs["password"] = settings.redis_password

    client = redis.Redis(**redis_kwargs)
    client.ping()
    logger.info("Redis client initialized")
    return client


def get_job_tracker() -> JobTracker:
    """Get the process-wide JobTracker, connecting on first use."""
    global _job_tracker
    if _job_tracker is None:
        _job_tracker = JobTracker(redis_client=init_redis_client())
    return _job_tracker


def set_job_tracker(tracker: Optional[JobTracker]) -> None:
    """Replace the process-wide JobTracker (None forces a reconnect on next use)."""
    global _job_tracker
    _job_tracker = tracker

"""
Background infrastructure: broker, shared clients, job records and workers.
"""

from .job_tracker import JobTracker, get_job_tracker
from .models import get_qdrant_client, get_vector_store

__all__ = [
    "JobTracker",
    "get_job_tracker",
    "get_qdrant_client",
    "get_vector_store",
]

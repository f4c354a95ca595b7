"""
Dramatiq actors. Importing this package declares every ingestion actor, so it
is the module to hand to the ``dramatiq`` CLI.
"""

from .ingestion import ingest_file_job, ingest_repo_job, ingest_video_link_job

__all__ = ["ingest_file_job", "ingest_repo_job", "ingest_video_link_job"]

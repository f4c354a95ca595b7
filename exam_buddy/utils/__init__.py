"""
Utility functions for Exam Buddy.
"""

from .helpers import (
    chunk_point_id,
    generate_upload_filename,
    parse_github_repo_url,
    resolve_collection_name,
)

__all__ = [
    # From helpers
    "chunk_point_id",
    "generate_upload_filename",
    "parse_github_repo_url",
    "resolve_collection_name",
]

import hashlib
import os
import re
import secrets
import time
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse

from exam_buddy.config.settings import settings
from exam_buddy.core.exceptions import BadRequest

__all__ = [
    "generate_upload_filename",
    "safe_basename",
    "resolve_collection_name",
    "parse_github_repo_url",
    "chunk_point_id",
]

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def generate_upload_filename(original_name: Optional[str]) -> str:
    """
    Build a collision-resistant storage name: ``<epoch ms>-<9 random digits>-<original name>``.

    Only the basename of the client supplied name is kept.
    """
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}-{safe_basename(original_name)}"


def safe_basename(original_name: Optional[str]) -> str:
    """Client supplied file name without any directory part."""
    name = os.path.basename((original_name or "").replace("\\", "/")).strip()
    return name or "upload.pdf"


def resolve_collection_name(session_id: Optional[str] = None) -> str:
    """
    Map an optional session id to the collection it reads and writes.

    Without a session every caller shares the default collection.
    """
    if session_id is None or session_id == "":
        return settings.qdrant_collection

    if not SESSION_ID_PATTERN.match(session_id):
        raise BadRequest("session_id may only contain letters, digits, '-' and '_' (max 64 characters)")

    return f"{settings.qdrant_collection}-{session_id}"


def parse_github_repo_url(url: str) -> Tuple[str, Optional[str]]:
    """
    Extract ``owner/name`` and an optional branch from a repository URL.

    Accepts ``https://github.com/owner/name``, with or without ``.git`` or a
    trailing slash, and ``.../tree/<branch>`` links. A bare ``owner/name`` is
    accepted too.

    Args:
        url: Repository link as submitted by the client

    Returns:
        Tuple of (repo, branch); branch is None when the link names none

    Raises:
        ValueError: If no owner/name pair can be found
    """
    url = url.strip()
    if "://" not in url and not url.startswith("github.com"):
        path = url
    else:
        if "://" not in url:
            url = f"https://{url}"
        path = urlparse(url).path

    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        raise ValueError(f"Not a repository link: {url}")

    owner, name = parts[0], parts[1]
    if name.endswith(".git"):
        name = name[:-4]
    if not owner or not name:
        raise ValueError(f"Not a repository link: {url}")

    branch = None
    if len(parts) >= 4 and parts[2] == "tree":
        branch = parts[3]

    return f"{owner}/{name}", branch


def chunk_point_id(source: str, ordinal: int, content: str) -> str:
    """
    Deterministic vector point id for a chunk.

    Re-running the same job produces the same ids, so a redelivered job
    overwrites its own points instead of duplicating them.
    """
    digest = hashlib.sha1(content.encode("utf-8")).hexdigest()
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{source}#{ordinal}#{digest}"))

"""
Loader Factory
Resolves the document loader for each job kind.
"""

import logging
from typing import List

from exam_buddy.config.settings import settings
from exam_buddy.models.enums import JobKind
from .base.processor import BaseDocumentLoader
from .loaders.pdf_loader import PDFLoader
from .loaders.youtube_loader import YouTubeTranscriptLoader
from .loaders.github_loader import GitHubRepoLoader

logger = logging.getLogger(__name__)


class LoaderFactory:
    """Factory for the per-lane document loaders."""

    @staticmethod
    def create_loader(kind: str) -> BaseDocumentLoader:
        """
        Create the loader for a job kind.

        Args:
            kind: Job kind ("file", "video_link", "repo")

        Returns:
            Appropriate loader instance

        Raises:
            ValueError: If the kind is not supported
        """
        if kind == JobKind.FILE:
            return PDFLoader()

        elif kind == JobKind.VIDEO_LINK:
            return YouTubeTranscriptLoader(
                language=settings.youtube_language,
                chunk_seconds=settings.youtube_chunk_seconds,
            )

        elif kind == JobKind.REPO:
            return GitHubRepoLoader(
                branch=settings.github_branch,
                recursive=settings.github_recursive,
                access_token=settings.github_access_token,
                github_api_url=settings.github_api_url,
            )

        else:
            raise ValueError(
                f"Unknown job kind: '{kind}'. "
                f"Supported kinds: {LoaderFactory.get_supported_kinds()}"
            )

    @staticmethod
    def get_supported_kinds() -> List[str]:
        return [kind.value for kind in JobKind]

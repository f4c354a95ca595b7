import logging
from typing import Any, Dict, List

from langchain_community.document_loaders import YoutubeLoader
from langchain_community.document_loaders.youtube import TranscriptFormat
from langchain_core.documents import Document

from exam_buddy.core.ingestion.base.processor import BaseDocumentLoader
from exam_buddy.models.enums import DocumentSource
from exam_buddy.models.jobs import VideoLinkJob

logger = logging.getLogger(__name__)


class YouTubeTranscriptLoader(BaseDocumentLoader):
    """
    Loads the transcript of a video link as time-stamped segments.

    Each segment covers ``chunk_seconds`` of the video and is cited by its
    start offset.
    """

    source_type = DocumentSource.YOUTUBE

    def __init__(self, language: str = "en", chunk_seconds: int = 120):
        self.language = language
        self.chunk_seconds = chunk_seconds

    def load_documents(self, job: VideoLinkJob) -> List[Document]:
        loader = YoutubeLoader.from_youtube_url(
            job.url,
            language=[self.language],
            transcript_format=TranscriptFormat.CHUNKS,
            chunk_size_seconds=self.chunk_seconds,
        )
        documents = loader.load()
        logger.info(f"Fetched {len(documents)} transcript segments for {job.url}")
        return documents

    def build_locator(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        start_seconds = int(metadata.get("start_seconds", 0))
        return {
            "startSeconds": start_seconds,
            "timestamp": metadata.get("start_timestamp", ""),
        }

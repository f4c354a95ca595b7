"""
Base Document Loader
Common loading flow for every ingestion lane.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from langchain_core.documents import Document

from exam_buddy.core.exceptions import IngestionFailure
from exam_buddy.models.enums import DocumentSource
from exam_buddy.models.jobs import UploadJob

logger = logging.getLogger(__name__)


class BaseDocumentLoader(ABC):
    """
    Base class for all document loaders.

    Subclasses fetch raw documents for a job; this class normalizes their
    locator metadata so every chunk carries ``metadata["loc"]`` and
    ``metadata["source"]`` whatever lane it came from.
    """

    source_type: DocumentSource

    @abstractmethod
    def load_documents(self, job: UploadJob) -> List[Document]:
        """
        Fetch the raw documents for a job, in source order.

        Raises:
            Exception: Any fetch or parse error; the worker lets it propagate
        """

    @abstractmethod
    def build_locator(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Build the ``loc`` entry from a raw document's metadata."""

    def source_name(self, job: UploadJob, metadata: Dict[str, Any]) -> str:
        return metadata.get("source") or job.source

    def load(self, job: UploadJob) -> List[Document]:
        """
        Load and normalize the documents of a job.

        Args:
            job: The upload job to load

        Returns:
            Ordered documents with ``loc``, ``source`` and ``source_type`` metadata

        Raises:
            IngestionFailure: If the source yields no document with text
        """
        logger.info(f"Loading {job.source} with {self.__class__.__name__}")

        raw_documents = self.load_documents(job)

        documents = []
        for doc in raw_documents:
            if not doc.page_content or not doc.page_content.strip():
                continue

            metadata = dict(doc.metadata)
            metadata["loc"] = self.build_locator(doc.metadata)
            metadata["source"] = self.source_name(job, doc.metadata)
            metadata["source_type"] = self.source_type.value
            documents.append(Document(page_content=doc.page_content, metadata=metadata))

        if not documents:
            raise IngestionFailure(f"No readable content in {job.source}", job_id=job.job_id)

        logger.info(f"Loaded {len(documents)} documents from {job.source}")
        return documents

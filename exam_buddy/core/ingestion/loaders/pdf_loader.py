import os
import logging
from typing import Any, Dict, List

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document

from exam_buddy.core.ingestion.base.processor import BaseDocumentLoader
from exam_buddy.models.enums import DocumentSource
from exam_buddy.models.jobs import FileJob

logger = logging.getLogger(__name__)


class PDFLoader(BaseDocumentLoader):
    """Loads a stored PDF upload, one document per page."""

    source_type = DocumentSource.PDF

    def load_documents(self, job: FileJob) -> List[Document]:
        if not os.path.exists(job.storage_path):
            raise FileNotFoundError(f"PDF file not found: {job.storage_path}")

        documents = PyPDFLoader(job.storage_path).load()
        logger.info(f"Extracted {len(documents)} pages from {job.filename}")
        return documents

    def build_locator(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        # PyPDFLoader numbers pages from 0; readers cite them from 1
        return {"pageNumber": int(metadata.get("page", 0)) + 1}

    def source_name(self, job: FileJob, metadata: Dict[str, Any]) -> str:
        return job.filename

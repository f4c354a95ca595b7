"""
Ingestion pipeline: load, split, then embed and append one job.
"""

import time
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from exam_buddy.config.settings import settings
from exam_buddy.core.vectorstore import QdrantStore
from exam_buddy.models.jobs import UploadJob
from exam_buddy.utils.helpers import chunk_point_id
from exam_buddy.utils.logging import get_job_logger
from .factory import LoaderFactory
from .splitter import DocumentSplitter

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Turns an upload job into vectors in the job's collection.

    Running the same job twice leaves the collection unchanged the second
    time: every chunk gets a point id derived from its source, position and
    text, so a redelivered job overwrites its own points.
    """

    def __init__(
        self,
        vector_store_provider: Callable[[str], QdrantStore],
        splitter: Optional[DocumentSplitter] = None,
        loader_factory: type = LoaderFactory,
    ):
        self.vector_store_provider = vector_store_provider
        self.splitter = splitter or DocumentSplitter(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            enabled=settings.chunking_enabled,
        )
        self.loader_factory = loader_factory

    def process(self, job: UploadJob) -> Dict[str, Any]:
        """
        Process one job end to end.

        Args:
            job: The job to ingest

        Returns:
            Summary with document/chunk counts and the target collection

        Raises:
            Exception: Any loader, embedding or insert error, unchanged
        """
        job_logger = get_job_logger(logger, job.job_id, job.kind)
        start_time = time.time()

        loader = self.loader_factory.create_loader(job.kind)
        documents = loader.load(job)

        chunks = self.splitter.split(documents)

        ingestion_time = datetime.now().isoformat()
        ids = []
        for chunk in chunks:
            chunk.metadata["job_id"] = job.job_id
            chunk.metadata["ingestion_time"] = ingestion_time
            ids.append(chunk_point_id(job.source, chunk.metadata["chunk_index"], chunk.page_content))

        vector_store = self.vector_store_provider(job.collection_name)
        vector_store.add_documents(chunks, ids=ids)

        elapsed = time.time() - start_time
        job_logger.info(f"Added {len(chunks)} chunks to {job.collection_name} in {elapsed:.2f}s")

        return {
            "document_count": len(documents),
            "chunk_count": len(chunks),
            "collection_name": job.collection_name,
            "processing_time": round(elapsed, 3),
        }

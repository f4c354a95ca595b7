"""
Ingestion: per-lane loaders, the chunking stage and the pipeline that ties
them to the vector store.
"""

from .factory import LoaderFactory
from .pipeline import IngestionPipeline
from .splitter import DocumentSplitter

__all__ = ["LoaderFactory", "IngestionPipeline", "DocumentSplitter"]

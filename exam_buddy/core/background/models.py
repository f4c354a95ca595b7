"""
Process-wide clients shared by the API and the ingestion workers.

Both sides build their vector stores here, from the same settings, so queries
are always embedded with the model the stored vectors came from.
"""

import logging
import threading
from typing import Dict, Optional

from langchain_core.embeddings import Embeddings
from qdrant_client import QdrantClient

from exam_buddy.config.settings import settings
from exam_buddy.core.vectorstore import QdrantStore

logger = logging.getLogger(__name__)

_QDRANT_CLIENT: Optional[QdrantClient] = None
_EMBEDDING_FUNCTION: Optional[Embeddings] = None
_VECTOR_STORES: Dict[str, QdrantStore] = {}
_lock = threading.Lock()


def get_qdrant_client() -> QdrantClient:
    """Get the cached Qdrant client, creating it on first use."""
    global _QDRANT_CLIENT

    with _lock:
        if _QDRANT_CLIENT is None:
            if settings.qdrant_url:
                _QDRANT_CLIENT = QdrantClient(url=settings.qdrant_url, api_key=settings.qdrant_api_key)
            else:
                _QDRANT_CLIENT = QdrantClient(
                    host=settings.qdrant_host,
                    port=settings.qdrant_port,
                    api_key=settings.qdrant_api_key,
                )
            logger.info("Qdrant client initialized")
        return _QDRANT_CLIENT


def get_embedding_function() -> Embeddings:
    """Get the cached embedding client."""
    global _EMBEDDING_FUNCTION

    with _lock:
        if _EMBEDDING_FUNCTION is None:
            _EMBEDDING_FUNCTION = settings.embedding_function
            logger.info(f"Embedding client initialized for {settings.embedding_model}")
        return _EMBEDDING_FUNCTION


def get_vector_store(collection_name: Optional[str] = None) -> QdrantStore:
    """
    Get the vector store for a collection (the default collection if omitted).

    One QdrantStore per collection name per process, so lazy creation of a
    collection is serialized within the process.
    """
    collection_name = collection_name or settings.qdrant_collection

    client = get_qdrant_client()
    embedding_function = get_embedding_function()

    with _lock:
        store = _VECTOR_STORES.get(collection_name)
        if store is None:
            store = QdrantStore(
                client=client,
                collection_name=collection_name,
                embedding_function=embedding_function,
            )
            _VECTOR_STORES[collection_name] = store
        return store


def configure(qdrant_client: Optional[QdrantClient] = None,
              embedding_function: Optional[Embeddings] = None) -> None:
    """
    Replace the shared clients and drop cached vector stores.

    Points the process at another Qdrant or embedding backend, e.g. an
    in-memory Qdrant under tests.
    """
    global _QDRANT_CLIENT, _EMBEDDING_FUNCTION

    with _lock:
        _QDRANT_CLIENT = qdrant_client
        _EMBEDDING_FUNCTION = embedding_function
        _VECTOR_STORES.clear()

import logging
import threading
from typing import List, Optional, Tuple

from langchain_qdrant import QdrantVectorStore
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from qdrant_client import QdrantClient
from qdrant_client.http import models as rest
from qdrant_client.http.exceptions import UnexpectedResponse

logger = logging.getLogger(__name__)


class QdrantStore:
    """
    One named Qdrant collection and its lifecycle.

    The collection is created lazily on the first insertion and dropped by
    ``delete_collection``; the next insertion recreates it. Searching a
    collection that does not exist yields no results instead of an error.
    """

    # Metadata fields that get a keyword payload index on creation
    INDEXED_FIELDS = [
        "metadata.source",
        "metadata.job_id",
    ]

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str,
        embedding_function: Embeddings,
    ):
        """
        Initialize the Qdrant vector store.

        Args:
            client: QdrantClient instance
            collection_name: Name of the collection to use
            embedding_function: Function to create embeddings
        """
        self.client = client
        self.collection_name = collection_name
        self.embedding_function = embedding_function

        self._lock = threading.Lock()
        self._langchain_qdrant: Optional[QdrantVectorStore] = None

    def collection_exists(self) -> bool:
        return self.client.collection_exists(self.collection_name)

    def ensure_collection(self) -> bool:
        """
        Create the collection if it does not exist yet.

        A concurrent creator (another worker process) may win the race between
        the existence check and the create call; that is treated as success.

        Returns:
            True if this call created the collection
        """
        with self._lock:
            if self.collection_exists():
                return False

            # Create a sample embedding to determine dimension
            sample_embedding = self.embedding_function.embed_query("sample text")
            embedding_dimension = len(sample_embedding)

            try:
                self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=rest.VectorParams(
                        size=embedding_dimension,
                        distance=rest.Distance.COSINE,
                    ),
                )
            except Exception:
                if self.collection_exists():
                    logger.info(f"Collection {self.collection_name} was created concurrently, reusing it")
                    return False
                raise

            logger.info(f"Qdrant collection {self.collection_name} created with {embedding_dimension} dimensions")
            self._create_payload_indexes()
            return True

    def _create_payload_indexes(self) -> None:
        for field in self.INDEXED_FIELDS:
            self.client.create_payload_index(
                collection_name=self.collection_name,
                field_name=field,
                field_schema=rest.PayloadSchemaType.KEYWORD,
            )

    def _store(self) -> QdrantVectorStore:
        # The langchain wrapper validates the collection on construction,
        # so it is only built once the collection exists.
        if self._langchain_qdrant is None:
            self._langchain_qdrant = QdrantVectorStore(
                client=self.client,
                collection_name=self.collection_name,
                embedding=self.embedding_function,
                distance=rest.Distance.COSINE,
            )
        return self._langchain_qdrant

    def add_documents(self, documents: List[Document], ids: Optional[List[str]] = None) -> List[str]:
        """
        Embed and append documents, creating the collection if needed.

        Args:
            documents: List of documents to add
            ids: Optional point ids; re-adding with the same ids overwrites the points

        Returns:
            List of point IDs
        """
        if not documents:
            return []

        self.ensure_collection()
        return self._store().add_documents(documents, ids=ids)

    def similarity_search_with_score(self, query: str, k: int = 3) -> List[Tuple[Document, float]]:
        """
        Top-k cosine similarity search, best match first.

        Args:
            query: Query string
            k: Number of results to return

        Returns:
            List of (document, score) tuples; empty if the collection does not exist
        """
        if not self.collection_exists():
            logger.info(f"Collection {self.collection_name} does not exist, nothing to retrieve")
            return []

        try:
            return self._store().similarity_search_with_score(query=query, k=k)
        except UnexpectedResponse as e:
            # Dropped between the existence check and the search
            if e.status_code == 404:
                logger.info(f"Collection {self.collection_name} was deleted during the search, nothing to retrieve")
                return []
            raise

    def delete_collection(self) -> bool:
        """
        Drop the collection. Synchronous: it is gone when this returns.

        Returns:
            True if a collection was deleted, False if none existed
        """
        with self._lock:
            if not self.collection_exists():
                return False

            self.client.delete_collection(collection_name=self.collection_name)
            self._langchain_qdrant = None
            logger.info(f"Qdrant collection {self.collection_name} deleted")
            return True

    def count(self) -> int:
        if not self.collection_exists():
            return 0
        return self.client.count(collection_name=self.collection_name, exact=True).count

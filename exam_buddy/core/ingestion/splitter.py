"""
Chunking stage between loading and embedding.

Loaders return page, segment or file sized documents; this stage cuts them
into overlapping pieces that each keep the metadata of their parent.
"""

import logging
from typing import List

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

logger = logging.getLogger(__name__)


class DocumentSplitter:
    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200, enabled: bool = True):
        if chunk_overlap >= chunk_size:
            raise ValueError(f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})")

        self.enabled = enabled
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )

    def split(self, documents: List[Document]) -> List[Document]:
        """
        Split documents into chunks and number them in order.

        Args:
            documents: Loaded documents, in source order

        Returns:
            Chunks in source order, each with a ``chunk_index``
        """
        if self.enabled:
            chunks = self.text_splitter.split_documents(documents)
        else:
            chunks = [Document(page_content=d.page_content, metadata=dict(d.metadata)) for d in documents]

        for index, chunk in enumerate(chunks):
            chunk.metadata["chunk_index"] = index

        logger.info(f"Split {len(documents)} documents into {len(chunks)} chunks")
        return chunks

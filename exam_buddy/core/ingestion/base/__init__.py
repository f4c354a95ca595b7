from .processor import BaseDocumentLoader

__all__ = ["BaseDocumentLoader"]

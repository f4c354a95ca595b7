from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from langchain_core.documents import Document


# ============================================================================
# Request Models
# ============================================================================

class LinkRequest(BaseModel):
    """Body of the video-link and repository-link intake endpoints."""
    link: Optional[str] = None
    session_id: Optional[str] = None


# ============================================================================
# Response Models
# ============================================================================

class MessageResponse(BaseModel):
    message: str


class SubmitResponse(BaseModel):
    """Response for a queued ingestion job."""
    message: str
    job_id: str
    session_id: Optional[str] = None


class ChunkResponse(BaseModel):
    """A retrieved chunk in the shape the chat UI reads (``pageContent`` + ``metadata``)."""
    model_config = ConfigDict(populate_by_name=True)

    page_content: str = Field(alias="pageContent")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Document) -> "ChunkResponse":
        return cls(page_content=document.page_content, metadata=dict(document.metadata))


class ChatResponse(BaseModel):
    """
    Chat answer plus the chunks it was grounded on.

    ``docs`` and ``documents`` carry the same list; older clients read one,
    newer clients the other.
    """
    message: str
    docs: List[ChunkResponse] = Field(default_factory=list)
    documents: List[ChunkResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class JobRecordResponse(BaseModel):
    job_id: str
    job_type: str
    status: str
    created_at: float
    updated_at: float
    attempts: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

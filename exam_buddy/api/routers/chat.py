import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from exam_buddy.api.dependencies import get_chat_service
from exam_buddy.core.query.chat_service import ChatService
from exam_buddy.models.schema import ChatResponse, ChunkResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/chat", response_model=ChatResponse)
def chat(
        message: Optional[str] = Query(None, description="The new question"),
        previous_message: str = Query("", description="The user's previous message"),
        previous_response: str = Query("", description="The assistant's previous reply"),
        session_id: Optional[str] = Query(None),
        service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer a question from the uploaded material.

    Retrieves the closest chunks, asks the chat model with the previous
    exchange as context, and returns the answer with the chunks used.
    """
    result = service.answer(
        message,
        previous_user_message=previous_message,
        previous_assistant_message=previous_response,
        session_id=session_id,
    )

    chunks = [ChunkResponse.from_document(doc) for doc in result.documents]
    return ChatResponse(message=result.answer, docs=chunks, documents=chunks)

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from exam_buddy.api.dependencies import get_intake_service
from exam_buddy.models.schema import MessageResponse
from exam_buddy.services.intake_service import IntakeService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/deleteCollections", response_model=MessageResponse)
def delete_collections(
        session_id: Optional[str] = Query(None),
        service: IntakeService = Depends(get_intake_service),
) -> MessageResponse:
    """
    Delete all uploaded material of a session (the shared collection by default).
    Succeeds whether or not anything was stored.
    """
    deleted = service.reset_collection(session_id=session_id)
    if deleted:
        return MessageResponse(message="Collections deleted successfully")
    return MessageResponse(message="No collections to delete")

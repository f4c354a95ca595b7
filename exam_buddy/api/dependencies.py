import logging
from typing import Optional

from exam_buddy.core.background.job_tracker import JobTracker, get_job_tracker
from exam_buddy.core.background.models import get_embedding_function, get_qdrant_client, get_vector_store
from exam_buddy.core.exceptions import InternalError
from exam_buddy.core.query.chat_service import ChatService
from exam_buddy.core.query.llm import get_chat_model
from exam_buddy.services.intake_service import IntakeService

# Configure logging
logger = logging.getLogger(__name__)

# Service instances
intake_service: Optional[IntakeService] = None
chat_service: Optional[ChatService] = None


def init_services() -> None:
    """Initialize the service layer. Collaborators are resolved on first use."""
    global intake_service, chat_service

    if intake_service is None:
        logger.info("Initializing Intake Service...")
        intake_service = IntakeService(
            job_tracker_provider=get_job_tracker,
            vector_store_provider=get_vector_store,
        )

    if chat_service is None:
        logger.info("Initializing Chat Service...")
        chat_service = ChatService(
            vector_store_provider=get_vector_store,
            chat_model_provider=get_chat_model,
        )


def load_all_components() -> None:
    """
    Initialize components at application startup.

    A collaborator that is down at startup is logged and retried on first
    use, so the API still starts and answers /health.
    """
    logger.info("Initializing API service components...")

    init_services()

    for name, init in (
        ("Redis job tracker", get_job_tracker),
        ("Qdrant client", get_qdrant_client),
        ("Embedding client", get_embedding_function),
        ("Chat model client", get_chat_model),
    ):
        try:
            init()
            logger.info(f"{name} ready")
        except Exception as e:
            logger.error(f"{name} not available yet: {str(e)}")

    logger.info("API service initialization complete")


# Infrastructure dependencies
def get_job_tracker_dependency() -> JobTracker:
    """Get the JobTracker, or fail with 500 if Redis is unreachable."""
    try:
        return get_job_tracker()
    except Exception as e:
        logger.error(f"Job tracker not available: {str(e)}")
        raise InternalError("Job tracker not available", original=e)


# Service dependencies
def get_intake_service() -> IntakeService:
    """Get the cached Intake Service instance."""
    if intake_service is None:
        init_services()
    return intake_service


def get_chat_service() -> ChatService:
    """Get the cached Chat Service instance."""
    if chat_service is None:
        init_services()
    return chat_service

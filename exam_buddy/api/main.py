from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exam_buddy import __version__
from exam_buddy.api.dependencies import load_all_components
from exam_buddy.api.routers import chat, collections, jobs, upload
from exam_buddy.config.settings import settings
from exam_buddy.core.exceptions import ExamBuddyError, UpstreamError
from exam_buddy.models.schema import ErrorResponse
from exam_buddy.utils.logging import setup_logger

# Define API metadata
API_TITLE = "Exam Buddy API"
API_DESCRIPTION = """
Chat with your course material.

Upload a PDF, a YouTube link or a GitHub repository link; background workers
load, split and embed it into a vector collection. Ask questions on /chat and
get answers grounded in the closest chunks, with page citations.
"""

CHAT_APOLOGY = "Sorry, I couldn't come up with an answer right now. Please try again in a moment."

# Configure logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load components when the FastAPI server starts."""
    setup_logger("exam_buddy", level=settings.log_level, log_file=settings.log_file)
    logger.info("Starting Exam Buddy API service...")

    load_all_components()

    yield  # Application runs

    logger.info("Shutting down Exam Buddy API service")


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    # The chat UI shows `message` as the assistant's turn
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "message": CHAT_APOLOGY, "docs": [], "documents": []},
    )


@app.exception_handler(ExamBuddyError)
async def exam_buddy_error_handler(request: Request, exc: ExamBuddyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.message).model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content=ErrorResponse(error=f"Invalid request: {errors}").model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


app.include_router(upload.router, prefix="/upload", tags=["Upload"])
app.include_router(chat.router, tags=["Chat"])
app.include_router(collections.router, tags=["Collections"])
app.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {"message": "Hello from Exam Buddy", "version": __version__, "docs": "/docs"}


# Health check endpoint
@app.get("/health", tags=["Health"])
def health_check():
    """Check connectivity to Redis and Qdrant."""
    from exam_buddy.core.background.job_tracker import get_job_tracker
    from exam_buddy.core.background.models import get_qdrant_client

    redis_ok = False
    job_counts = None
    try:
        tracker = get_job_tracker()
        redis_ok = bool(tracker.redis.ping())
        job_counts = tracker.count_jobs_by_status()
    except Exception as e:
        logger.warning(f"Redis health check failed: {str(e)}")

    qdrant_ok = False
    try:
        get_qdrant_client().get_collections()
        qdrant_ok = True
    except Exception as e:
        logger.warning(f"Qdrant health check failed: {str(e)}")

    return {
        "status": "healthy" if redis_ok and qdrant_ok else "degraded",
        "version": __version__,
        "components": {
            "redis": "connected" if redis_ok else "error",
            "qdrant": "connected" if qdrant_ok else "error",
        },
        "jobs": job_counts,
    }

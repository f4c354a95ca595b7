"""
Broker setup shared by the API (which enqueues) and the workers (which consume).

The API process and every worker import this module before any actor is
declared, so all actors bind to the same broker.
"""

import os
import logging

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import Middleware

from exam_buddy.config.settings import settings

logger = logging.getLogger(__name__)

worker_lane = os.environ.get("WORKER_LANE", "all")


class IngestionFailureMiddleware(Middleware):
    """
    Makes dead-lettered ingestion jobs visible.

    Once the Retries middleware gives up on a message the broker nacks it into
    its dead-letter queue; this hook logs that and marks the job record failed.
    """

    def after_nack(self, broker, message):
        job_data = message.args[0] if message.args else {}
        job_id = job_data.get("job_id") if isinstance(job_data, dict) else None
        retries = message.options.get("retries", 0)

        logger.error(
            f"Job {job_id} ({message.actor_name}) dead-lettered after {retries} retries: "
            f"{message.options.get('traceback', 'no traceback recorded')}"
        )

        if job_id is None:
            return

        # Import here to avoid circular imports
        from .job_tracker import get_job_tracker

        get_job_tracker().mark_failed(job_id)


class WorkerLifecycleLogger(Middleware):
    """Logs worker boot and shutdown with the lane being served."""

    def before_worker_boot(self, broker, worker):
        from exam_buddy.utils.logging import setup_logger

        setup_logger("exam_buddy", level=settings.log_level, log_file=settings.log_file)
        logger.info(f"Starting ingestion worker for lane {worker_lane} (pid {os.getpid()})")

    def after_worker_shutdown(self, broker, worker):
        logger.info(f"Ingestion worker for lane {worker_lane} stopped")


def create_broker() -> dramatiq.Broker:
    """Redis broker in production, in-process stub broker under unit tests."""
    if settings.unit_tests:
        broker = StubBroker()
        broker.emit_after("process_boot")
    else:
        broker_kwargs = {
            "host": settings.redis_host,
            "port": settings.redis_port,
            "client_name": f"exam-buddy-{worker_lane}-{os.getpid()}",
        }
        if settings.redis_password:
            broker_kwargs["password"] = settings.redis_password
        broker = RedisBroker(**broker_kwargs)

    broker.add_middleware(IngestionFailureMiddleware())
    broker.add_middleware(WorkerLifecycleLogger())
    return broker


broker = create_broker()

# Set the broker as default
dramatiq.set_broker(broker)

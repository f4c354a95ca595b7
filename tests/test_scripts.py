"""
Tests for the operational scripts and process logging setup.
"""

from unittest.mock import MagicMock, patch

from langchain_core.documents import Document

import job_cleanup_service
from exam_buddy.core.background.models import get_vector_store
from scripts.reset_collection import reset_collection
from exam_buddy.utils.logging import get_job_logger, setup_logger
from scripts.start_worker import build_dramatiq_args


def test_worker_args_for_one_lane():
    """Test that a lane worker only consumes its own queue."""
    args = build_dramatiq_args("video_link", threads=20, processes=1)

    assert args[0] == "exam_buddy.core.background.actors"
    assert args[args.index("--threads") + 1] == "20"
    assert args[args.index("--queues") + 1] == "video_link_queue"


def test_worker_args_for_all_lanes():
    """Test that the default worker consumes every queue."""
    args = build_dramatiq_args("all", threads=100, processes=2)

    assert "--queues" not in args
    assert args[args.index("--processes") + 1] == "2"


def test_cleanup_cycle(job_tracker):
    """Test one cleanup pass over the job records."""
    job_tracker.create_job("job-1", "file", {})

    assert job_cleanup_service.run_cleanup_cycle(job_tracker, retention_days=7) == 0
    assert job_tracker.get_job("job-1") is not None


def test_cleanup_service_survives_redis_outage():
    """Test that a failed cycle is logged and the service carries on."""
    with patch.object(job_cleanup_service, "init_redis_client", side_effect=ConnectionError("Redis down")) as init:
        job_cleanup_service.run_cleanup_service(retention_days=7, interval=0, once=True)

    init.assert_called_once()


def test_reset_collection_script(shared_clients):
    """Test dropping a session's collection from the shell."""
    get_vector_store("college-syllabus-alice").add_documents([Document(page_content="notes", metadata={})])

    assert reset_collection("alice") is True
    assert not shared_clients.collection_exists("college-syllabus-alice")
    assert reset_collection("alice") is False


def test_cleanup_logs_redis_memory():
    """Test the memory report reads the redis INFO section."""
    tracker = MagicMock()
    tracker.redis.info.return_value = {"used_memory_human": "2M", "used_memory_peak_human": "3M"}

    job_cleanup_service.log_redis_memory(tracker)

    tracker.redis.info.assert_called_once_with("memory")


def test_setup_logger_writes_file(temp_data_dir):
    """Test that the process logger writes the same line to stdout and the log file."""
    log_file = f"{temp_data_dir}/logs/worker.log"

    logger = setup_logger("exam_buddy.test_logging", level="DEBUG", log_file=log_file)
    setup_logger("exam_buddy.test_logging", level="DEBUG", log_file=log_file)

    # Reconfiguring replaces the handlers
    assert len(logger.handlers) == 2

    get_job_logger(logger, "job-1", "file").info("Completed")
    for handler in logger.handlers:
        handler.flush()

    with open(log_file) as f:
        line = f.read().strip()
    assert line.endswith("[exam_buddy.test_logging] - [job job-1] [file] Completed")
    assert "[INFO]" in line

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

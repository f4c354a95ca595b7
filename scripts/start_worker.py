#!/usr/bin/env python3
"""
Start an ingestion worker for one lane (or all of them).

Wraps the dramatiq CLI so every lane runs in its own process with the
configured number of worker threads:

    python scripts/start_worker.py --lane file
    python scripts/start_worker.py --lane video_link --threads 20
"""

import os
import sys
import argparse
import logging

from dramatiq.cli import main as dramatiq_main

from exam_buddy.config.settings import settings
from exam_buddy.core.orchestration.queue_manager import QueueNames
from exam_buddy.models.enums import JobKind
from exam_buddy.utils.logging import setup_logger

logger = logging.getLogger("exam_buddy.start_worker")

ACTORS_MODULE = "exam_buddy.core.background.actors"


def build_dramatiq_args(lane: str, threads: int, processes: int) -> list:
    """Command line for the dramatiq CLI serving ``lane``."""
    args = [ACTORS_MODULE, "--processes", str(processes), "--threads", str(threads)]

    if lane != "all":
        args += ["--queues", QueueNames.for_kind(lane).value]

    return args


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Start an Exam Buddy ingestion worker")
    parser.add_argument("--lane", choices=[kind.value for kind in JobKind] + ["all"], default="all",
                        help="Which queue to consume")
    parser.add_argument("--threads", type=int, default=settings.worker_concurrency,
                        help="Worker threads per process (jobs processed concurrently)")
    parser.add_argument("--processes", type=int, default=1,
                        help="Worker processes")
    args = parser.parse_args()

    # Read by the broker setup for client names and boot logs
    os.environ["WORKER_LANE"] = args.lane

    dramatiq_args = build_dramatiq_args(args.lane, args.threads, args.processes)
    setup_logger("exam_buddy", level=settings.log_level, log_file=settings.log_file)
    logger.info(f"Starting dramatiq {' '.join(dramatiq_args)}")

    sys.argv = ["dramatiq"] + dramatiq_args
    sys.exit(dramatiq_main())

#!/usr/bin/env python3
"""
Job record cleanup service.

Periodically removes finished ingestion job records older than the retention
period so the Redis hash does not grow without bound. Run it as a separate
process next to the API and the workers.
"""

import time
import logging
import argparse
from datetime import datetime, timedelta

from exam_buddy.config.settings import settings
from exam_buddy.core.background.job_tracker import JobTracker, init_redis_client
from exam_buddy.utils.logging import setup_logger

logger = logging.getLogger("exam_buddy.job_cleanup")


def log_redis_memory(tracker: JobTracker) -> None:
    info = tracker.redis.info("memory")
    logger.info(
        f"Redis memory: Used={info.get('used_memory_human', 'unknown')}, "
        f"Peak={info.get('used_memory_peak_human', 'unknown')}"
    )


def run_cleanup_cycle(tracker: JobTracker, retention_days: int) -> int:
    """Delete expired records once and report what is left."""
    counts_before = tracker.count_jobs_by_status()
    deleted_count = tracker.cleanup_old_jobs(retention_days=retention_days)
    logger.info(f"Cleanup complete: deleted {deleted_count} of {counts_before['total']} job records")
    return deleted_count


def run_cleanup_service(retention_days: int = 7, interval: int = 3600, once: bool = False) -> None:
    """Run the cleanup service continuously."""
    logger.info("Starting job cleanup service")
    logger.info(f"Redis connection: {settings.redis_host}:{settings.redis_port}")
    logger.info(f"Job retention period: {retention_days} days, interval: {interval} seconds")

    while True:
        # New connection each cycle to ride out Redis restarts
        try:
            tracker = JobTracker(redis_client=init_redis_client())
            log_redis_memory(tracker)
            run_cleanup_cycle(tracker, retention_days)
            tracker.redis.close()
        except Exception as e:
            logger.error(f"Error during cleanup cycle: {str(e)}")

        if once:
            return

        next_run = datetime.now() + timedelta(seconds=interval)
        logger.info(f"Next cleanup scheduled at: {next_run.strftime('%Y-%m-%d %H:%M:%S')}")
        time.sleep(interval)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Job record cleanup service")
    parser.add_argument("--retention-days", type=int, default=settings.job_retention_days,
                        help="Number of days to retain finished job records")
    parser.add_argument("--interval", type=int, default=3600,
                        help="Cleanup interval in seconds")
    parser.add_argument("--once", action="store_true",
                        help="Run a single cleanup cycle and exit")
    args = parser.parse_args()

    setup_logger("exam_buddy", level=settings.log_level, log_file=settings.log_file)

    run_cleanup_service(
        retention_days=args.retention_days,
        interval=args.interval,
        once=args.once,
    )

"""
Logging setup for Exam Buddy processes.

The API, every worker lane and the ops scripts configure the ``exam_buddy``
package logger once at startup; module loggers below it inherit the handlers.
"""

import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"


def setup_logger(
    name: str = "exam_buddy",
    level: Union[int, str] = "INFO",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger to write to stdout and optionally to a file.

    Calling it again replaces the handlers instead of stacking them, so a
    worker that re-runs its boot hook does not print every line twice.

    Args:
        name: Logger to configure
        level: Level name or number
        log_file: Also append to this file when set

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()) if isinstance(level, str) else level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


class JobLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every record with the job id and lane it belongs to."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[job {self.extra['job_id']}] [{self.extra['kind']}] {msg}", kwargs


def get_job_logger(logger: logging.Logger, job_id: str, kind: str) -> JobLoggerAdapter:
    return JobLoggerAdapter(logger, {"job_id": job_id, "kind": kind})

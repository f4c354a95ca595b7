"""
Orchestration: queue lanes and job dispatch.
"""

from .queue_manager import QueueNames, enqueue_job

__all__ = ["QueueNames", "enqueue_job"]

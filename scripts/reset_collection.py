#!/usr/bin/env python3
"""
Delete the uploaded material of a session (the shared collection by default).

Same operation as GET /deleteCollections, for use from a shell.
"""

import sys
import argparse
import logging

from exam_buddy.config.settings import settings
from exam_buddy.core.background.models import get_vector_store
from exam_buddy.core.exceptions import ExamBuddyError
from exam_buddy.utils.helpers import resolve_collection_name
from exam_buddy.utils.logging import setup_logger

logger = logging.getLogger("exam_buddy.reset_collection")


def reset_collection(session_id=None) -> bool:
    """Drop the collection; returns False if there was nothing to drop."""
    collection_name = resolve_collection_name(session_id)
    vector_store = get_vector_store(collection_name)

    logger.info(f"Collection {collection_name} holds {vector_store.count()} points")
    deleted = vector_store.delete_collection()

    if deleted:
        logger.info(f"Collection {collection_name} deleted")
    else:
        logger.info(f"Collection {collection_name} doesn't exist")
    return deleted


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Delete an Exam Buddy vector collection")
    parser.add_argument("--session-id", default=None,
                        help="Session whose collection to delete (default: the shared collection)")
    args = parser.parse_args()

    setup_logger("exam_buddy", level=settings.log_level, log_file=settings.log_file)

    try:
        reset_collection(args.session_id)
    except ExamBuddyError as e:
        logger.error(e.message)
        sys.exit(2)

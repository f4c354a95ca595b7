from . import chat, collections, jobs, upload

__all__ = ["chat", "collections", "jobs", "upload"]

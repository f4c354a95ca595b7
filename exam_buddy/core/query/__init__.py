"""
Query side: retrieval, prompt assembly and answer generation.
"""

from .chat_service import ChatResult, ChatService
from .llm import get_chat_model

__all__ = ["ChatResult", "ChatService", "get_chat_model"]

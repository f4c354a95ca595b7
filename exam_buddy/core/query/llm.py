import logging
import threading
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from exam_buddy.config.settings import settings

logger = logging.getLogger(__name__)

_CHAT_MODEL: Optional[BaseChatModel] = None
_lock = threading.Lock()


def get_chat_model() -> BaseChatModel:
    """Get the cached chat completion client."""
    global _CHAT_MODEL

    with _lock:
        if _CHAT_MODEL is None:
            _CHAT_MODEL = ChatOpenAI(
                model=settings.chat_model,
                api_key=settings.openai_api_key,
                temperature=settings.chat_temperature,
                timeout=settings.chat_timeout,
            )
            logger.info(f"Chat model client initialized for {settings.chat_model}")
        return _CHAT_MODEL

import time
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from langchain_core.documents import Document
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from exam_buddy.config.settings import settings
from exam_buddy.core.exceptions import BadRequest, UpstreamError
from exam_buddy.core.vectorstore import QdrantStore
from exam_buddy.utils.helpers import resolve_collection_name
from .prompts import build_system_prompt

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    answer: str
    documents: List[Document] = field(default_factory=list)


class ChatService:
    """
    Answers a question from the top-k chunks of a collection.

    The previous exchange (one user message, one assistant reply) is passed
    in by the client; nothing about the conversation is stored here.
    """

    def __init__(
        self,
        vector_store_provider: Callable[[str], QdrantStore],
        chat_model_provider: Callable[[], BaseChatModel],
        top_k: Optional[int] = None,
    ):
        self.vector_store_provider = vector_store_provider
        self.chat_model_provider = chat_model_provider
        self.top_k = top_k or settings.retriever_top_k

    def retrieve_documents(self, question: str, collection_name: str) -> List[Document]:
        """
        Retrieve the closest chunks, best match first.

        Raises:
            UpstreamError: If embedding the question or searching fails
        """
        start_time = time.time()
        try:
            vector_store = self.vector_store_provider(collection_name)
            results = vector_store.similarity_search_with_score(query=question, k=self.top_k)
        except Exception as e:
            logger.error(f"Error retrieving documents from {collection_name}: {str(e)}")
            raise UpstreamError("Could not search the uploaded material", original=e)

        search_time = time.time() - start_time
        logger.info(f"Retrieved {len(results)} documents in {search_time:.2f}s")
        return [doc for doc, _ in results]

    @staticmethod
    def build_messages(
        question: str,
        documents: List[Document],
        previous_user_message: str = "",
        previous_assistant_message: str = "",
    ) -> List[BaseMessage]:
        """System prompt, previous user turn, previous assistant turn, new question. Empty turns are left out."""
        messages: List[BaseMessage] = [SystemMessage(content=build_system_prompt(documents))]
        if previous_user_message and previous_user_message.strip():
            messages.append(HumanMessage(content=previous_user_message))
        if previous_assistant_message and previous_assistant_message.strip():
            messages.append(AIMessage(content=previous_assistant_message))
        messages.append(HumanMessage(content=question))
        return messages

    def answer(
        self,
        question: Optional[str],
        previous_user_message: str = "",
        previous_assistant_message: str = "",
        session_id: Optional[str] = None,
    ) -> ChatResult:
        """
        Answer one chat turn.

        Args:
            question: The new user message
            previous_user_message: The user's previous message, if any
            previous_assistant_message: The assistant's previous reply, if any
            session_id: Optional session whose collection is searched

        Returns:
            The answer text and the chunks it was grounded on

        Raises:
            BadRequest: If the question is empty or the session id is malformed
            UpstreamError: If retrieval or generation fails
        """
        if question is None or not question.strip():
            raise BadRequest("message must not be empty")

        collection_name = resolve_collection_name(session_id)
        documents = self.retrieve_documents(question, collection_name)

        messages = self.build_messages(
            question,
            documents,
            previous_user_message=previous_user_message or "",
            previous_assistant_message=previous_assistant_message or "",
        )

        start_time = time.time()
        try:
            response = self.chat_model_provider().invoke(messages)
        except Exception as e:
            logger.error(f"Error generating answer: {str(e)}")
            raise UpstreamError("The chat model did not answer", original=e)

        logger.info(f"Generated answer in {time.time() - start_time:.2f}s from {len(documents)} documents")

        content = response.content if isinstance(response.content, str) else str(response.content)
        return ChatResult(answer=content, documents=documents)

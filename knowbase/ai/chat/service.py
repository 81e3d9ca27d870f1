"""
Knowledge chat service backed by Amazon Q Business.
"""

import asyncio

from knowbase.ai.base import ChatAnswer
from knowbase.ai.qbusiness.client import QBusinessClient
from knowbase.ai.qbusiness.config import get_qbusiness_settings
from knowbase.utils.logger import logger


class KnowledgeChatService:
    """Answers questions against the indexed knowledge base."""

    def __init__(self, client: QBusinessClient | None = None):
        self.settings = get_qbusiness_settings()
        self.client = client or QBusinessClient(self.settings)

    def resolve_user_id(self, session_email: str | None) -> str | None:
        """Identity sent to the backend: the signed-in user, else the configured default."""
        return session_email or self.settings.default_user_id

    async def ask(
        self,
        prompt: str,
        conversation_id: str | None = None,
        parent_message_id: str | None = None,
        user_id: str | None = None,
    ) -> ChatAnswer:
        """
        Ask a question and wait for the full answer.

        The blocking backend call runs in a worker thread. Cancelling the
        awaiting task does not stop that thread; its result is discarded.

        Raises:
            QBusinessError: If the backend call fails
        """
        answer = await asyncio.to_thread(
            self.client.chat,
            prompt,
            conversation_id,
            parent_message_id,
            user_id,
        )
        logger.info(
            "[KnowledgeChatService] Answer received",
            conversation_id=answer.conversation_id,
            answer_length=len(answer.text),
            source_count=len(answer.sources),
        )
        return answer


# Singleton service instance
_chat_service: KnowledgeChatService | None = None


def get_chat_service() -> KnowledgeChatService:
    """
    Get or create the chat service singleton.

    Returns:
        KnowledgeChatService: The chat service instance
    """
    global _chat_service
    if _chat_service is None:
        _chat_service = KnowledgeChatService()
        logger.info("Initialized KnowledgeChatService")
    return _chat_service

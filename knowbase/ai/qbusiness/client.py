"""
Amazon Q Business ChatSync client.

The boto3 call is blocking; callers on the event loop run `chat` in a
worker thread.
"""

import os
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from knowbase.ai.base import ChatAnswer, Citation
from knowbase.ai.qbusiness.config import QBusinessSettings, get_qbusiness_settings
from knowbase.ai.qbusiness.exceptions import (
    QBusinessAnonymousModeError,
    QBusinessConfigurationError,
    QBusinessError,
)
from knowbase.config import get_app_settings
from knowbase.utils.logger import logger

EMPTY_ANSWER_TEXT = "（回答テキストを取得できませんでした）"


def _is_anonymous_mode_error(error: ClientError) -> bool:
    details = error.response.get("Error", {})
    return (
        details.get("Code") == "ValidationException"
        and "anonymous" in (details.get("Message") or "").lower()
    )


class QBusinessClient:
    """Thin wrapper around `qbusiness.chat_sync`."""

    def __init__(self, settings: QBusinessSettings | None = None, client: Any = None):
        self.settings = settings or get_qbusiness_settings()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            region = (
                self.settings.region
                or os.getenv("AWS_REGION")
                or get_app_settings().aws_region
            )
            self._client = boto3.client("qbusiness", region_name=region)
        return self._client

    def chat(
        self,
        prompt: str,
        conversation_id: str | None = None,
        parent_message_id: str | None = None,
        user_id: str | None = None,
    ) -> ChatAnswer:
        """
        Ask one question and wait for the complete answer.

        Args:
            prompt: User question
            conversation_id: Conversation to continue, if any
            parent_message_id: Last system message id in that conversation
            user_id: Identity attached to the request

        Returns:
            ChatAnswer: Answer text, attributed sources and conversation ids

        Raises:
            QBusinessConfigurationError: If no application id is configured
            QBusinessAnonymousModeError: If an anonymous-only application
                rejects the request and no retry is possible
            QBusinessError: For any other backend failure
        """
        if not self.settings.application_id:
            raise QBusinessConfigurationError(
                "QBUSINESS_APPLICATION_ID is not configured", status_code=500
            )

        request: dict[str, Any] = {
            "applicationId": self.settings.application_id,
            "userMessage": prompt,
        }
        if conversation_id:
            request["conversationId"] = conversation_id
            if parent_message_id:
                request["parentMessageId"] = parent_message_id

        try:
            response = self._chat_sync(request, user_id)
        except ClientError as e:
            if not _is_anonymous_mode_error(e):
                raise self._error(e) from e
            if not (user_id and self.settings.allow_anonymous_fallback):
                raise QBusinessAnonymousModeError(
                    self._message(e), status_code=502, original_error=e
                ) from e

            logger.warning(
                "[QBusinessClient] Application is anonymous-only, retrying without user id"
            )
            try:
                response = self._chat_sync(request, None)
            except ClientError as retry_error:
                if _is_anonymous_mode_error(retry_error):
                    raise QBusinessAnonymousModeError(
                        self._message(retry_error), original_error=retry_error
                    ) from retry_error
                raise self._error(retry_error) from retry_error
        except BotoCoreError as e:
            logger.error("[QBusinessClient] ChatSync failed", error=str(e))
            raise QBusinessError(f"ChatSync failed: {e}", original_error=e) from e

        return self._to_answer(response)

    def _chat_sync(self, request: dict[str, Any], user_id: str | None) -> dict[str, Any]:
        kwargs = dict(request)
        if user_id:
            kwargs["userId"] = user_id
        logger.info(
            "[QBusinessClient] ChatSync",
            has_user_id=bool(user_id),
            has_conversation=bool(request.get("conversationId")),
        )
        return self.client.chat_sync(**kwargs)

    @staticmethod
    def _message(error: ClientError) -> str:
        return error.response.get("Error", {}).get("Message") or str(error)

    def _error(self, error: ClientError) -> QBusinessError:
        code = error.response.get("Error", {}).get("Code", "Unknown")
        message = f"ChatSync failed ({code}): {self._message(error)}"
        logger.error(f"[QBusinessClient] {message}")
        return QBusinessError(message, original_error=error)

    @staticmethod
    def _to_answer(response: dict[str, Any]) -> ChatAnswer:
        sources = [
            Citation(
                title=attribution.get("title") or "",
                url=attribution.get("url") or "",
                excerpt=attribution.get("snippet") or "",
            )
            for attribution in response.get("sourceAttributions") or []
        ]
        return ChatAnswer(
            text=response.get("systemMessage") or EMPTY_ANSWER_TEXT,
            sources=sources,
            conversation_id=response.get("conversationId"),
            system_message_id=response.get("systemMessageId"),
        )

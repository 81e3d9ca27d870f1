"""FastAPI router for knowledge chat endpoints with SSE streaming."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from knowbase.ai.chat.relay import ChatRelay
from knowbase.ai.chat.schemas import ChatRequest, ChatResponse
from knowbase.ai.chat.service import KnowledgeChatService, get_chat_service
from knowbase.ai.qbusiness.config import QBusinessSettings, get_qbusiness_settings
from knowbase.auth.dependencies import get_session_email
from knowbase.utils.logger import logger

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/stream")
async def stream_chat(
    body: ChatRequest,
    request: Request,
    chat_service: Annotated[KnowledgeChatService, Depends(get_chat_service)],
    settings: Annotated[QBusinessSettings, Depends(get_qbusiness_settings)],
) -> StreamingResponse:
    """
    Stream an answer via Server-Sent Events.

    Args:
        body: Question and optional conversation ids
        request: Incoming request (session cookie)
        chat_service: Chat service dependency
        settings: Relay timing and chunking

    Returns:
        StreamingResponse: SSE stream of sources, answer chunks and done/error
    """
    user_id = chat_service.resolve_user_id(get_session_email(request))
    logger.info(
        "[USER_INPUT]",
        user_id=user_id,
        input=body.prompt,
        conversation_id=body.conversation_id,
    )

    relay = ChatRelay(
        chat_service,
        body.prompt,
        conversation_id=body.conversation_id,
        parent_message_id=body.parent_message_id,
        user_id=user_id,
        ping_interval=settings.ping_interval,
        chunk_size=settings.chunk_size,
    )

    return StreamingResponse(
        relay.stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@router.post("", response_model=ChatResponse)
async def ask_chat(
    body: ChatRequest,
    request: Request,
    chat_service: Annotated[KnowledgeChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Answer a question in one JSON response."""
    user_id = chat_service.resolve_user_id(get_session_email(request))
    answer = await chat_service.ask(
        body.prompt,
        conversation_id=body.conversation_id,
        parent_message_id=body.parent_message_id,
        user_id=user_id,
    )
    return ChatResponse(
        answer=answer.text,
        sources=answer.sources,
        conversation_id=answer.conversation_id,
        parent_message_id=answer.system_message_id,
    )

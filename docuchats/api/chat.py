"""Chat endpoints: complete replies and Server-Sent Event streaming.

Every request carries its own conversation identity (session id and document)
and the paragraph the user is reading, which becomes the message context.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from docuchats.agent.chat_agent import ChatCompletionError, get_agent_service
from docuchats.agent.context import ChatContext
from docuchats.models.schemas import ChatRequest, ChatResponse, StreamChunk, StreamStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def _context_for(request: ChatRequest) -> ChatContext:
    context = ChatContext(document=request.document, paragraph_text=request.context)
    if request.session_id:
        context.session_id = request.session_id
    return context


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


async def _stream_chunks(context: ChatContext, message: str) -> AsyncGenerator[str]:
    """Yield SSE events for one reply, ending with a done chunk."""
    yield _sse(StreamChunk(content="", done=False, status=StreamStatus.RECEIVED))

    try:
        agent_service = get_agent_service()
        first = True
        async for content in agent_service.stream_response(context, message):
            chunk_status = StreamStatus.GENERATING if first else None
            first = False
            yield _sse(StreamChunk(content=content, done=False, status=chunk_status))
    except (ChatCompletionError, ValueError) as e:
        logger.error(f"Chat stream failed: {e}")
        yield _sse(
            StreamChunk(content="", done=True, status=StreamStatus.ERROR, error=str(e))
        )
        return

    yield _sse(StreamChunk(content="", done=True, status=StreamStatus.COMPLETE))


@router.post("/stream")
async def chat_stream(request: ChatRequest) -> StreamingResponse:
    """Stream the assistant's reply as Server-Sent Events.

    Each event is a JSON StreamChunk; the last one has done=true.
    """
    context = _context_for(request)
    return StreamingResponse(
        _stream_chunks(context, request.message),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Session-Id": context.session_id},
    )


@router.post("", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """Return the assistant's complete reply.

    Raises:
        500: Chat service is not configured.
        502: The language model call failed.
    """
    context = _context_for(request)
    try:
        agent_service = get_agent_service()
    except ValueError as e:
        logger.error(f"Chat service unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Chat service is not configured",
        ) from e

    try:
        reply = await agent_service.complete(context, request.message)
    except ChatCompletionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to get a response from the assistant",
        ) from e

    return ChatResponse(response=reply, session_id=context.session_id)

"""Study notes endpoint."""

import logging

from fastapi import APIRouter, HTTPException, status

from docuchats.agent.chat_agent import ChatCompletionError, get_agent_service
from docuchats.models.schemas import NotesRequest, NotesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NotesResponse)
async def generate_notes(request: NotesRequest) -> NotesResponse:
    """Generate study notes for document text.

    Raises:
        500: Notes service is not configured.
        502: The language model call failed.
    """
    try:
        agent_service = get_agent_service()
    except ValueError as e:
        logger.error(f"Notes service unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Notes service is not configured",
        ) from e

    try:
        notes = await agent_service.generate_notes(request.text)
    except ChatCompletionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate AI notes",
        ) from e

    return NotesResponse(notes=notes)

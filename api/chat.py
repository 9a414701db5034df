import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from openai import AsyncOpenAI

from agents.assistant.chat import ask_parts_assistant
from config import get_settings
from models.chat import ChatRequest, ChatResponse

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@lru_cache()
def get_openai_client() -> Optional[AsyncOpenAI]:
    if not settings.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY not found in settings. The parts assistant will not function.")
        return None
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.HTTP_REQUEST_TIMEOUT)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, client: Optional[AsyncOpenAI] = Depends(get_openai_client)) -> ChatResponse:
    """
    Ask the parts assistant a question, as text or as an image of a part.

    Raises:
        HTTPException: 501 when no OpenAI key is configured, or the assistant's failure status.
    """
    if client is None:
        raise HTTPException(status_code=501, detail="Chat assistant is not configured (Missing API Key)")

    reply = await ask_parts_assistant(client, settings.OPENAI_MODEL, request.message, request.type)
    return ChatResponse(response=reply)

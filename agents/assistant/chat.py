import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from openai import APIError, AsyncOpenAI, RateLimitError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are a helpful assistant for a car parts store in Norway.
Answer questions about vehicle parts: what a part does, which parts are typically
needed for a repair, and what to look for when matching a part to a vehicle.
When shown an image, identify the part as precisely as you can (type, likely
position on the vehicle, visible brand or article numbers) and say how certain you are.
Keep answers short and practical. If you are unsure, say so instead of guessing.
"""

IMAGE_PROMPT = "Identify this car part."
DEFAULT_IMAGE_MIME = "image/png"


def as_data_url(image: str) -> str:
    """Images arrive either as full data URLs or as bare base64 payloads."""
    image = image.strip()
    if image.startswith("data:"):
        return image
    return f"data:{DEFAULT_IMAGE_MIME};base64,{image}"


def build_chat_messages(message: str, message_type: str = "text") -> List[Dict[str, Any]]:
    """Constructs the messages list for the chat completions call."""
    if message_type == "image":
        user_content: Any = [
            {"type": "text", "text": IMAGE_PROMPT},
            {"type": "image_url", "image_url": {"url": as_data_url(message)}},
        ]
    else:
        user_content = message

    return [
        {"role": "system", "content": SYSTEM_PROMPT.strip()},
        {"role": "user", "content": user_content},
    ]


async def ask_parts_assistant(client: AsyncOpenAI, model: str, message: str, message_type: str = "text") -> str:
    """
    Sends one user turn to the chat model and returns the reply text.

    Args:
        client: Configured AsyncOpenAI client.
        model: Chat model name.
        message: Question text or image payload.
        message_type: "text" or "image".

    Raises:
        HTTPException: If the model is rate limited, unavailable or returns nothing.
    """
    logger.info(f"Requesting OpenAI ({model}) chat reply for a {message_type} message")
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=build_chat_messages(message, message_type),
            temperature=0.3,
        )
    except RateLimitError as e:
        logger.error(f"OpenAI Rate Limit Error: {e}")
        raise HTTPException(status_code=429, detail="The assistant is currently overloaded. Please try again later.")
    except APIError as e:
        logger.error(f"OpenAI API Error: {e}")
        raise HTTPException(status_code=503, detail="The assistant is unavailable or encountered an error.")

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.error("OpenAI response content is empty.")
        raise HTTPException(status_code=500, detail="The assistant returned an empty response.")
    return content

from pydantic import BaseModel, Field
from typing import Literal


class ChatRequest(BaseModel):
    """A single user turn for the parts assistant."""
    message: str = Field(..., min_length=1, description="Question text, or an image as a data URL / base64 string")
    type: Literal["text", "image"] = Field("text", description="How to interpret `message`")


class ChatResponse(BaseModel):
    response: str = Field(..., description="The assistant's answer")

"""Tool call schemas the agent accepts from the LLM.

The model is asked to answer with one JSON object; `parse_tool_call` pulls the
first `{...}` span out of the completion and validates it against the union
below, discriminated on the `tool` field.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

Tone = Literal["casual", "professional", "energetic", "educational"]

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class YouTubeSearchCall(BaseModel):
    tool: Literal["youtube_search"]
    query: str = Field(description="Search query for YouTube videos")
    type: Literal["search", "popular"] = Field(
        description="Type of search - keyword search or popular videos"
    )


class TranscribeCall(BaseModel):
    tool: Literal["transcribe_video"]
    videoUrl: str = Field(description="YouTube video URL to transcribe")
    videoTitle: Optional[str] = Field(None, description="Title of the video for context")


class GenerateScriptCall(BaseModel):
    tool: Literal["generate_script"]
    inputText: str = Field(description="Transcript or content to base the script on")
    niche: str = Field(description="Content niche (e.g., tech, fitness, lifestyle)")
    tone: Tone
    duration: int = Field(description="Target duration in seconds (30-600)")


class ChatResponseCall(BaseModel):
    tool: Literal["chat_response"]
    message: str = Field(description="Direct response to user without using tools")


class CreateVideoIdeaCall(BaseModel):
    tool: Literal["create_video_idea"]
    topic: str = Field(description="Main topic extracted from user input")
    context: str = Field(description="Additional context like location, event, or situation")
    userIntent: str = Field(description="What the user wants to achieve")


ToolCall = Annotated[
    Union[
        YouTubeSearchCall,
        TranscribeCall,
        GenerateScriptCall,
        ChatResponseCall,
        CreateVideoIdeaCall,
    ],
    Field(discriminator="tool"),
]

_adapter: TypeAdapter[Any] = TypeAdapter(ToolCall)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first `{...}` span of `text` decoded as a JSON object.

    Raises ValueError when there is no such span or it does not decode to an
    object.
    """
    m = _JSON_OBJECT.search(text or "")
    if not m:
        raise ValueError("No valid JSON found in response")
    data = json.loads(m.group(0))
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def parse_tool_call(text: str) -> Any:
    """Validate an LLM completion into one of the tool call models.

    Raises ValueError (pydantic's ValidationError is a subclass) on any
    malformed or unknown tool call.
    """
    return _adapter.validate_python(extract_json_object(text))


__all__ = [
    "ToolCall",
    "YouTubeSearchCall",
    "TranscribeCall",
    "GenerateScriptCall",
    "ChatResponseCall",
    "CreateVideoIdeaCall",
    "extract_json_object",
    "parse_tool_call",
]

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AgentRequest(BaseModel):
    message: Optional[str] = None
    action: Optional[str] = Field(None, description="'clear' empties the conversation")


class AgentResponse(BaseModel):
    success: bool = True
    responses: Optional[List[Dict[str, Any]]] = None
    message: Optional[str] = None
    history: List[Dict[str, Any]]


class ChatRequest(BaseModel):
    messages: Optional[Any] = None


class ChatResponse(BaseModel):
    message: str


class GenerateScriptRequest(BaseModel):
    inputText: Optional[str] = None
    niche: Optional[str] = "general"
    tone: Optional[str] = "casual"
    duration: Optional[float] = 60


class GenerateScriptResponse(BaseModel):
    script: str
    hooks: List[str] = []


class TranscribeRequest(BaseModel):
    videoUrl: Optional[str] = None


class TranscribeResponse(BaseModel):
    transcript: str
    videoId: str
    success: bool = True


class TrendSearchRequest(BaseModel):
    query: Optional[str] = None


class TrendPopularRequest(BaseModel):
    categoryId: str = "0"
    regionCode: str = "US"
    maxResults: int = Field(5, ge=1, le=50)


class TrendingVideoModel(BaseModel):
    id: str
    url: str
    caption: str
    author: str
    thumbnail: str
    views: int
    likes: int
    comments: int
    shares: int
    duration: int
    publishedAt: str


class TrendsResponse(BaseModel):
    videos: List[TrendingVideoModel]


class ErrorResponse(BaseModel):
    error: str
    retry_after: Optional[float] = None

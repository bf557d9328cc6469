from typing import Any, Dict, List, Literal, TypedDict


Role = Literal["user", "assistant", "tool"]


class _AgentMessageBase(TypedDict):
    id: str
    role: Role
    content: str
    timestamp: str


class AgentMessage(_AgentMessageBase, total=False):
    toolCall: Dict[str, Any]
    toolResult: Any


class TrendingVideo(TypedDict, total=False):
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


class VideoScript(TypedDict):
    title: str
    hook: str
    script: str
    cta: str
    reasoning: str
    hashtags: List[str]


class VideoIdeaResult(TypedDict):
    summary: str
    scripts: List[VideoScript]
    sourceVideos: List[TrendingVideo]
    suggestions: List[str]


class TopicContext(TypedDict):
    topic: str
    context: str
    intent: str


class SourceTranscript(TypedDict):
    video: TrendingVideo
    transcript: str

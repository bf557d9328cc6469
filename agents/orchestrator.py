"""OpenScript agent

Routes each user message either to a single tool (trend search,
transcription, script generation, chat) picked by the LLM, or to the fixed
video-idea workflow:

1. extract topic / context / intent from the message
2. search trending videos for the topic
3. transcribe the top three results
4. write three script variants (Quick Tips, AI Experiment, Hidden Gems)
5. format one combined markdown answer

Every exchange is appended to an in-memory transcript that lives as long as
the agent instance and is only emptied by `clear_history`.
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .agent_base import AgentBase
from .backends import backend_from_env
from .errors import APIError, MissingAPIKey
from .formatting import (
    format_script_result,
    format_transcription_result,
    format_video_idea_response,
    format_youtube_results,
)
from .llm_client import FriendliClient
from .prompts import PromptStore
from .tool_calls import (
    ChatResponseCall,
    CreateVideoIdeaCall,
    GenerateScriptCall,
    TranscribeCall,
    YouTubeSearchCall,
    extract_json_object,
    parse_tool_call,
)
from .types import (
    AgentMessage,
    SourceTranscript,
    TopicContext,
    TrendingVideo,
    VideoIdeaResult,
    VideoScript,
)

logger = logging.getLogger(__name__)

TOOL_SELECTION_PROMPT_ID = "os-001"
TOPIC_EXTRACTION_PROMPT_ID = "os-002"

VIDEO_IDEA_KEYWORDS = [
    "video idea",
    "script",
    "content",
    "going to",
    "trip",
    "visiting",
    "traveling",
    "give me ideas",
    "what should i make",
    "help me create",
]
VIDEO_IDEA_PATTERN = re.compile(r"i'm (going|traveling|visiting|planning)", re.IGNORECASE)

TRAVEL_WORDS = ("going", "trip", "visit")
KNOWN_LOCATIONS = ["san francisco", "sf", "new york", "la", "los angeles", "miami", "chicago"]

TOP_VIDEOS_TO_TRANSCRIBE = 3

HELP_MESSAGE = (
    "I'd be happy to help you with viral video content creation! You can ask me "
    "to find trending videos, transcribe content, or generate scripts."
)
UNKNOWN_TOOL_MESSAGE = (
    "I'm not sure how to help with that. Try asking me to find videos, "
    "transcribe content, or generate scripts!"
)

SCRIPT_FORMATS = [
    {
        "type": "Quick Tips",
        "template": 'Create a viral "5 things" style script about {topic}',
        "hook": "Only have 1 day in {topic}? Here's how to do it all.",
    },
    {
        "type": "AI Experiment",
        "template": 'Create an "I let AI plan my..." style script for {topic}',
        "hook": "Can AI plan the perfect {topic} experience?",
    },
    {
        "type": "Hidden Gems",
        "template": 'Create a "locals only" secrets script about {topic}',
        "hook": "Hidden gems only locals know about {topic}",
    },
]

CTAS = {
    "Quick Tips": "Save this for your next trip!",
    "AI Experiment": "Would you trust AI with your plans?",
    "Hidden Gems": "Follow for more local secrets!",
}
DEFAULT_CTA = "Double tap if this helped!"

FOLLOW_UP_SUGGESTIONS = [
    "Make this into a carousel post",
    "Give me captions and hashtags",
    "Create a longer version",
    "Try this for a different location",
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_message(
    role: str,
    content: str,
    tool_call: Optional[BaseModel] = None,
    tool_result: Any = None,
) -> AgentMessage:
    msg: Dict[str, Any] = {
        "id": f"{role}_{uuid.uuid4().hex[:12]}",
        "role": role,
        "content": content,
        "timestamp": _now_iso(),
    }
    if tool_call is not None:
        msg["toolCall"] = tool_call.model_dump(exclude_none=True)
    if tool_result is not None:
        msg["toolResult"] = tool_result
    return msg  # type: ignore[return-value]


def is_video_idea_request(message: str) -> bool:
    lower = message.lower()
    return any(k in lower for k in VIDEO_IDEA_KEYWORDS) or bool(
        VIDEO_IDEA_PATTERN.search(message)
    )


def fallback_topic(message: str) -> TopicContext:
    """Keyword-only topic extraction used when the LLM answer is unusable."""
    lower = message.lower()
    words = lower.split()
    topic, context, intent = "content creation", "general", "video ideas"

    if any(w in words for w in TRAVEL_WORDS):
        context = "travel"
        for location in KNOWN_LOCATIONS:
            if re.search(rf"\b{re.escape(location)}\b", lower):
                topic = location
                break

    return {"topic": topic, "context": context, "intent": intent}


def generate_cta(script_type: str) -> str:
    return CTAS.get(script_type, DEFAULT_CTA)


def generate_hashtags(topic: str, script_type: str) -> List[str]:
    base_tags = ["#viral", "#fyp", "#trending"]
    topic_tags = ["#" + re.sub(r"\s+", "", topic).lower()]
    if script_type == "Quick Tips":
        type_tags = ["#tips", "#guide"]
    elif script_type == "AI Experiment":
        type_tags = ["#ai", "#experiment"]
    else:
        type_tags = ["#hidden", "#local", "#secret"]
    return (base_tags + topic_tags + type_tags)[:8]


class OpenScriptAgent(AgentBase):
    """Conversational agent with a process-lifetime transcript.

    `backend` provides search_videos / transcribe / generate_script; by
    default it is chosen by `backends.backend_from_env`.
    """

    def __init__(
        self,
        llm: Optional[FriendliClient] = None,
        backend: Any = None,
        prompt_store: Optional[PromptStore] = None,
    ):
        super().__init__(llm=llm, prompt_store=prompt_store)
        self.backend = backend if backend is not None else backend_from_env(self.llm)
        self.conversation_history: List[AgentMessage] = []

    # --- public API ---
    def process_message(self, user_message: str) -> List[AgentMessage]:
        self.conversation_history.append(make_message("user", user_message))

        if is_video_idea_request(user_message):
            responses = self.execute_video_idea_workflow(user_message)
        else:
            decision = self.decide_tool_use(user_message)
            responses = self.execute_tool_and_respond(decision, user_message)

        self.conversation_history.extend(responses)
        return responses

    def get_conversation_history(self) -> List[AgentMessage]:
        return self.conversation_history

    def clear_history(self) -> None:
        self.conversation_history = []

    # --- LLM helpers ---
    def _ask_llm(self, prompt_id: str, user_message: str) -> str:
        system_prompt = self.render_prompt(prompt_id, {"user_message": user_message})
        return self.llm.chat(system_prompt, user_message)

    def decide_tool_use(self, user_message: str) -> Any:
        try:
            return parse_tool_call(self._ask_llm(TOOL_SELECTION_PROMPT_ID, user_message))
        except (APIError, MissingAPIKey, ValueError) as exc:
            logger.warning("Tool decision error: %s", exc)
            return ChatResponseCall(tool="chat_response", message=HELP_MESSAGE)

    def extract_topic_and_context(self, user_message: str) -> TopicContext:
        try:
            data = extract_json_object(self._ask_llm(TOPIC_EXTRACTION_PROMPT_ID, user_message))
            topic = str(data.get("topic") or "").strip()
            if not topic:
                raise ValueError("topic missing from extraction")
            return {
                "topic": topic,
                "context": str(data.get("context") or "").strip(),
                "intent": str(data.get("intent") or "video ideas").strip(),
            }
        except (APIError, MissingAPIKey, ValueError) as exc:
            logger.warning("Topic extraction error: %s", exc)
        return fallback_topic(user_message)

    # --- single tool path ---
    def execute_tool_and_respond(
        self, tool_call: Any, user_message: str = ""
    ) -> List[AgentMessage]:
        if isinstance(tool_call, CreateVideoIdeaCall):
            topic_data: TopicContext = {
                "topic": tool_call.topic,
                "context": tool_call.context,
                "intent": tool_call.userIntent,
            }
            return self.execute_video_idea_workflow(user_message, topic_data=topic_data)

        responses = [make_message("tool", f"Using {tool_call.tool}...", tool_call=tool_call)]
        tool_result: Any = None

        try:
            if isinstance(tool_call, YouTubeSearchCall):
                tool_result = self.backend.search_videos(tool_call.query, tool_call.type)
                reply = format_youtube_results(tool_result, tool_call.query)
            elif isinstance(tool_call, TranscribeCall):
                tool_result = self.backend.transcribe(tool_call.videoUrl)
                reply = format_transcription_result(tool_result, tool_call.videoTitle)
            elif isinstance(tool_call, GenerateScriptCall):
                tool_result = self.backend.generate_script(
                    tool_call.inputText, tool_call.niche, tool_call.tone, tool_call.duration
                )
                reply = format_script_result(tool_result)
            elif isinstance(tool_call, ChatResponseCall):
                reply = tool_call.message
            else:
                reply = UNKNOWN_TOOL_MESSAGE
        except Exception as exc:
            logger.exception("Tool %s failed", tool_call.tool)
            reply = (
                f"Sorry, I encountered an error: {exc}. "
                "Please try again or ask me something else!"
            )

        responses.append(make_message("assistant", reply, tool_result=tool_result))
        return responses

    # --- video idea workflow ---
    def execute_video_idea_workflow(
        self, user_message: str, topic_data: Optional[TopicContext] = None
    ) -> List[AgentMessage]:
        responses: List[AgentMessage] = []
        topic_data = topic_data or self.extract_topic_and_context(user_message)
        topic = topic_data["topic"]
        logger.info("Video idea workflow for topic %r", topic)

        responses.append(
            make_message(
                "tool",
                f'🧠 Analyzing your request: "{topic}"...',
                tool_call=CreateVideoIdeaCall(
                    tool="create_video_idea",
                    topic=topic,
                    context=topic_data["context"],
                    userIntent=topic_data["intent"],
                ),
            )
        )

        try:
            search_result = self.backend.search_videos(topic, "search")
            videos: List[TrendingVideo] = search_result.get("videos") or []
            responses.append(
                make_message("tool", f'🔍 Found {len(videos)} trending videos about "{topic}"...')
            )

            responses.append(
                make_message("tool", "📝 Analyzing video content and extracting viral patterns...")
            )
            top_videos = videos[:TOP_VIDEOS_TO_TRANSCRIBE]
            transcripts = [self._transcribe_or_describe(v) for v in top_videos]

            responses.append(
                make_message("tool", f"🎬 Creating personalized scripts for your {topic} content...")
            )
            ideas = self.generate_video_ideas(topic_data, transcripts)

            responses.append(
                make_message(
                    "assistant",
                    format_video_idea_response(ideas),
                    tool_result={"videos": top_videos, "scripts": ideas["scripts"], "topic": topic},
                )
            )
        except Exception as exc:
            logger.exception("Video idea workflow failed for %r", topic)
            responses.append(
                make_message(
                    "assistant",
                    f"Sorry, I encountered an error while creating your video ideas: {exc}. "
                    "Let me try a simpler approach - what specific type of content are "
                    "you looking to create?",
                )
            )

        return responses

    def _transcribe_or_describe(self, video: TrendingVideo) -> SourceTranscript:
        try:
            result = self.backend.transcribe(video.get("url", ""))
            transcript = result.get("transcript") or ""
        except Exception as exc:
            logger.warning("Transcription of %s failed: %s", video.get("url"), exc)
            transcript = ""
        return {"video": video, "transcript": transcript or f"Video about {video.get('caption', '')}"}

    def generate_video_ideas(
        self, topic_data: TopicContext, transcripts: List[SourceTranscript]
    ) -> VideoIdeaResult:
        topic = topic_data["topic"]
        context = topic_data["context"]
        scripts: List[VideoScript] = []

        for fmt in SCRIPT_FORMATS:
            template = fmt["template"].format(topic=topic)
            hook = fmt["hook"].format(topic=topic)
            try:
                result = self.backend.generate_script(
                    f"Topic: {topic}. Context: {context}. Style: {fmt['type']}",
                    context or "lifestyle",
                    "casual",
                    30,
                )
                body = result.get("script") or template
                reasoning = (
                    f"This {fmt['type'].lower()} format works because it's highly "
                    "shareable and creates FOMO"
                )
            except Exception as exc:
                logger.warning("Script generation for %s failed: %s", fmt["type"], exc)
                body = template
                reasoning = "This format is proven to drive engagement"

            scripts.append(
                {
                    "title": f"{fmt['type']}: {topic}",
                    "hook": hook,
                    "script": body,
                    "cta": generate_cta(fmt["type"]),
                    "reasoning": reasoning,
                    "hashtags": generate_hashtags(topic, fmt["type"]),
                }
            )

        return {
            "summary": f"Here are 3 video ideas based on current trends about {topic}:",
            "scripts": scripts,
            "sourceVideos": [t["video"] for t in transcripts],
            "suggestions": list(FOLLOW_UP_SUGGESTIONS),
        }


__all__ = [
    "OpenScriptAgent",
    "is_video_idea_request",
    "fallback_topic",
    "generate_cta",
    "generate_hashtags",
    "make_message",
]

import json

import pytest
from conftest import FakeBackend, FakeLLM, make_video

from agents.backends import ToolError
from agents.errors import APIError, MissingAPIKey
from agents.orchestrator import (
    HELP_MESSAGE,
    OpenScriptAgent,
    fallback_topic,
    generate_cta,
    generate_hashtags,
    is_video_idea_request,
    make_message,
)
from agents.tool_calls import ChatResponseCall, YouTubeSearchCall


def _agent(replies=None, error=None, **backend_kwargs):
    llm = FakeLLM(replies=replies, error=error)
    backend = FakeBackend(**backend_kwargs)
    return OpenScriptAgent(llm=llm, backend=backend), llm, backend


@pytest.mark.parametrize(
    "message,expected",
    [
        ("Give me a video idea for my channel", True),
        ("I'm going to Miami next week", True),
        ("I'm planning a wedding", True),
        ("help me create something fun", True),
        ("Find trending videos about AI", False),
        ("transcribe https://youtu.be/dQw4w9WgXcQ", False),
    ],
)
def test_is_video_idea_request(message, expected):
    assert is_video_idea_request(message) is expected


def test_fallback_topic_travel_location():
    assert fallback_topic("I'm going to San Francisco tomorrow") == {
        "topic": "san francisco",
        "context": "travel",
        "intent": "video ideas",
    }


def test_fallback_topic_location_needs_whole_word():
    # "la" must not match inside "plan"
    assert fallback_topic("trip plan ideas")["topic"] == "content creation"
    assert fallback_topic("trip plan ideas")["context"] == "travel"


def test_fallback_topic_default():
    assert fallback_topic("random thoughts") == {
        "topic": "content creation",
        "context": "general",
        "intent": "video ideas",
    }


def test_cta_and_hashtags():
    assert generate_cta("Quick Tips") == "Save this for your next trip!"
    assert generate_cta("Unknown") == "Double tap if this helped!"
    assert generate_hashtags("New York", "AI Experiment") == [
        "#viral",
        "#fyp",
        "#trending",
        "#newyork",
        "#ai",
        "#experiment",
    ]
    assert len(generate_hashtags("x", "Hidden Gems")) == 7


def test_make_message_shape():
    call = YouTubeSearchCall(tool="youtube_search", query="ai", type="search")
    msg = make_message("tool", "Using youtube_search...", tool_call=call)
    assert msg["id"].startswith("tool_")
    assert msg["role"] == "tool"
    assert msg["toolCall"] == {"tool": "youtube_search", "query": "ai", "type": "search"}
    assert "toolResult" not in msg
    assert "T" in msg["timestamp"]


def test_search_tool_flow_appends_history():
    reply = json.dumps({"tool": "youtube_search", "query": "cats", "type": "search"})
    agent, llm, backend = _agent(replies=[reply], videos=[make_video(1, 2000)])

    responses = agent.process_message("Find trending videos about cats")

    assert [m["role"] for m in responses] == ["tool", "assistant"]
    assert responses[0]["content"] == "Using youtube_search..."
    assert backend.searches == [("cats", "search")]
    assert "Found 1 trending videos" in responses[1]["content"]
    assert responses[1]["toolResult"] == {"videos": [make_video(1, 2000)]}
    history = agent.get_conversation_history()
    assert [m["role"] for m in history] == ["user", "tool", "assistant"]
    assert history[0]["content"] == "Find trending videos about cats"
    # the routing prompt carries the user message
    assert "Find trending videos about cats" in llm.calls[0][1]


def test_transcribe_tool_flow():
    reply = json.dumps({"tool": "transcribe_video", "videoUrl": "https://youtu.be/dQw4w9WgXcQ", "videoTitle": "Rick"})
    agent, _, backend = _agent(replies=[reply])
    responses = agent.process_message("transcribe https://youtu.be/dQw4w9WgXcQ")
    assert backend.transcribed == ["https://youtu.be/dQw4w9WgXcQ"]
    assert 'Transcription complete for "Rick"' in responses[-1]["content"]


def test_generate_script_tool_flow():
    reply = json.dumps(
        {"tool": "generate_script", "inputText": "cold brew", "niche": "food", "tone": "energetic", "duration": 45}
    )
    agent, _, backend = _agent(replies=[reply])
    responses = agent.process_message("write me something about cold brew")
    assert backend.scripts == [("cold brew", "food", "energetic", 45)]
    assert "SCRIPT[cold brew]" in responses[-1]["content"]
    assert "1. hook a" in responses[-1]["content"]


def test_chat_response_tool():
    agent, _, _ = _agent(replies=['{"tool": "chat_response", "message": "Hello creator!"}'])
    responses = agent.process_message("hello")
    assert responses[-1]["content"] == "Hello creator!"
    assert "toolResult" not in responses[-1]


@pytest.mark.parametrize(
    "llm_kwargs",
    [
        {"replies": ["I think you want videos"]},
        {"replies": ['{"tool": "teleport"}']},
        {"error": APIError("Friendli API error: down", 503)},
        {"error": MissingAPIKey("Friendli", "FRIENDLI_API_KEY")},
    ],
)
def test_unusable_decision_falls_back_to_help(llm_kwargs):
    agent, _, _ = _agent(**llm_kwargs)
    decision = agent.decide_tool_use("hello")
    assert isinstance(decision, ChatResponseCall)
    assert decision.message == HELP_MESSAGE


def test_tool_error_becomes_apology():
    reply = json.dumps({"tool": "youtube_search", "query": "cats", "type": "popular"})
    agent, _, _ = _agent(replies=[reply], search_error=ToolError("YouTube API quota exceeded"))
    responses = agent.process_message("popular videos please")
    assert responses[-1]["content"] == (
        "Sorry, I encountered an error: YouTube API quota exceeded. "
        "Please try again or ask me something else!"
    )


def test_video_idea_workflow_messages_and_result():
    topic_reply = json.dumps({"topic": "Miami", "context": "upcoming trip", "intent": "travel content"})
    videos = [make_video(i) for i in range(5)]
    agent, _, backend = _agent(replies=[topic_reply], videos=videos)

    responses = agent.process_message("I'm going to Miami next week, give me ideas")

    contents = [m["content"] for m in responses]
    assert contents[0] == '🧠 Analyzing your request: "Miami"...'
    assert contents[1] == '🔍 Found 5 trending videos about "Miami"...'
    assert contents[2] == "📝 Analyzing video content and extracting viral patterns..."
    assert contents[3] == "🎬 Creating personalized scripts for your Miami content..."
    assert [m["role"] for m in responses] == ["tool", "tool", "tool", "tool", "assistant"]
    assert responses[0]["toolCall"]["tool"] == "create_video_idea"
    assert responses[0]["toolCall"]["topic"] == "Miami"

    # only the top three are transcribed
    assert backend.transcribed == [v["url"] for v in videos[:3]]
    assert len(backend.scripts) == 3
    assert backend.scripts[0] == ("Topic: Miami. Context: upcoming trip. Style: Quick Tips", "upcoming trip", "casual", 30)

    final = responses[-1]
    result = final["toolResult"]
    assert result["topic"] == "Miami"
    assert result["videos"] == videos[:3]
    assert [s["title"] for s in result["scripts"]] == [
        "Quick Tips: Miami",
        "AI Experiment: Miami",
        "Hidden Gems: Miami",
    ]
    assert result["scripts"][0]["script"] == "SCRIPT[Topic: Miami. Context: upcoming trip. Style: Quick Tips]"
    assert result["scripts"][0]["hook"] == "Only have 1 day in Miami? Here's how to do it all."
    assert "Here are 3 video ideas based on current trends about Miami:" in final["content"]
    assert len(agent.get_conversation_history()) == 6


def test_workflow_uses_fallback_topic_when_llm_fails():
    agent, _, backend = _agent(error=APIError("down"), videos=[])
    responses = agent.process_message("I'm going to Chicago on a trip")
    assert backend.searches == [("chicago", "search")]
    assert responses[1]["content"] == '🔍 Found 0 trending videos about "chicago"...'
    assert backend.transcribed == []
    assert responses[-1]["toolResult"]["videos"] == []


def test_workflow_survives_transcription_and_script_failures():
    agent, _, _ = _agent(
        replies=['{"topic": "Paris", "context": "", "intent": ""}'],
        videos=[make_video(1)],
        transcribe_error=ToolError("private"),
        script_error=ToolError("llm down"),
    )
    responses = agent.process_message("give me ideas for Paris")
    scripts = responses[-1]["toolResult"]["scripts"]
    assert scripts[0]["script"] == 'Create a viral "5 things" style script about Paris'
    assert scripts[0]["reasoning"] == "This format is proven to drive engagement"


def test_transcription_failure_describes_video():
    agent, _, _ = _agent(transcribe_error=ToolError("private"))
    out = agent._transcribe_or_describe(make_video(7))
    assert out["transcript"] == "Video about Video 7"


def test_workflow_search_failure_apologizes():
    agent, _, _ = _agent(
        replies=['{"topic": "Tokyo", "context": "trip", "intent": "travel"}'],
        search_error=ToolError("YouTube API quota exceeded"),
    )
    responses = agent.process_message("I'm visiting Tokyo")
    assert len(responses) == 2
    assert responses[-1]["role"] == "assistant"
    assert responses[-1]["content"].startswith(
        "Sorry, I encountered an error while creating your video ideas: YouTube API quota exceeded."
    )


def test_llm_selected_video_idea_runs_workflow():
    reply = json.dumps({"tool": "create_video_idea", "topic": "Berlin", "context": "weekend", "userIntent": "vlog"})
    agent, llm, backend = _agent(replies=[reply], videos=[make_video(1)])
    responses = agent.process_message("Berlin this weekend, help")
    assert responses[0]["content"] == '🧠 Analyzing your request: "Berlin"...'
    assert backend.searches == [("Berlin", "search")]
    # only the routing prompt went to the model; topic came from the tool call
    assert len(llm.calls) == 1


def test_clear_history():
    agent, _, _ = _agent(replies=['{"tool": "chat_response", "message": "hi"}'])
    agent.process_message("hello")
    assert agent.get_conversation_history()
    agent.clear_history()
    assert agent.get_conversation_history() == []


def test_empty_context_uses_lifestyle_niche():
    agent, _, backend = _agent(
        replies=['{"topic": "Paris", "context": "", "intent": ""}'],
        videos=[make_video(1)],
    )
    agent.process_message("give me ideas for Paris")
    assert backend.scripts[0] == ("Topic: Paris. Context: . Style: Quick Tips", "lifestyle", "casual", 30)
    assert all(s[1] == "lifestyle" for s in backend.scripts)


def test_missing_context_stays_empty():
    agent, _, _ = _agent(replies=['{"topic": "Rome"}'])
    assert agent.extract_topic_and_context("give me ideas for Rome") == {
        "topic": "Rome",
        "context": "",
        "intent": "video ideas",
    }

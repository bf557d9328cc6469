import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from agents.chat_responder import ChatResponder
from agents.errors import (
    APIError,
    DownloadFailed,
    InvalidVideoURL,
    MissingAPIKey,
    QuotaExceeded,
    TranscriptionFailed,
)
from agents.orchestrator import OpenScriptAgent
from agents.script_writer import ScriptWriter
from agents.transcriber import Transcriber
from agents.youtube_trends import TrendResearcher

from .schemas import (
    AgentRequest,
    AgentResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    GenerateScriptRequest,
    GenerateScriptResponse,
    TranscribeRequest,
    TranscribeResponse,
    TrendPopularRequest,
    TrendSearchRequest,
    TrendsResponse,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="OpenScript AI")

# Serve the chat UI (mounted from ./webui)
WEBUI_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "webui")
if os.path.isdir(WEBUI_DIR):
    app.mount("/ui", StaticFiles(directory=WEBUI_DIR, html=True), name="webui")

AGENT_HISTORY_LIMIT = 10
HISTORY_LIMIT = 20

# Process-global agent; the conversation lives as long as the server process
_agent: Optional[OpenScriptAgent] = None


def get_agent() -> OpenScriptAgent:
    global _agent
    if _agent is None:
        _agent = OpenScriptAgent()
    return _agent


def error_response(message: str, status_code: int, retry_after: Optional[float] = None) -> JSONResponse:
    body = ErrorResponse(error=message, retry_after=retry_after).model_dump(exclude_none=True)
    headers: Dict[str, str] = {}
    if retry_after:
        headers["Retry-After"] = str(int(retry_after))
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response("Invalid request body", 400)
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "invalid value")
    return error_response(f"Invalid request: {field}: {message}" if field else f"Invalid request: {message}", 400)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/agent", response_model=AgentResponse, response_model_exclude_none=True)
def agent_message(req: AgentRequest) -> Any:
    if not req.message and req.action != "clear":
        return error_response("Message is required", 400)

    try:
        agent = get_agent()

        if req.action == "clear":
            agent.clear_history()
            return {"success": True, "message": "Conversation history cleared", "history": []}

        if not agent.llm.configured:
            return error_response(str(MissingAPIKey("Friendli", "FRIENDLI_API_KEY")), 500)

        logger.info("Processing agent message: %s", req.message)
        responses = agent.process_message(req.message or "")
        history = agent.get_conversation_history()
        return {
            "success": True,
            "responses": responses,
            "history": history[-AGENT_HISTORY_LIMIT:],
        }
    except Exception as e:
        logger.exception("Agent processing error")
        return error_response(f"Agent failed: {str(e) or 'Unknown error'}", 500)


@app.get("/api/agent", response_model=AgentResponse, response_model_exclude_none=True)
def agent_history() -> Any:
    try:
        history = get_agent().get_conversation_history()
        return {"success": True, "history": history[-HISTORY_LIMIT:]}
    except Exception as e:
        logger.exception("Error getting conversation history")
        return error_response(f"Failed to get history: {str(e) or 'Unknown error'}", 500)


@app.post("/api/chat", response_model=ChatResponse)
def chat(req: ChatRequest) -> Any:
    if not isinstance(req.messages, list):
        return error_response("Messages array is required", 400)
    messages = [m for m in req.messages if isinstance(m, dict)]
    return ChatResponse(message=ChatResponder().reply(messages))


@app.post("/api/generate-script", response_model=GenerateScriptResponse)
def generate_script(req: GenerateScriptRequest) -> Any:
    if not req.inputText:
        return error_response("Input text is required", 400)

    writer = ScriptWriter()
    if not writer.llm.configured:
        return error_response(str(MissingAPIKey("Friendli", "FRIENDLI_API_KEY")), 500)

    try:
        script = writer.generate(
            req.inputText,
            niche="general" if req.niche is None else req.niche,
            tone="casual" if req.tone is None else req.tone,
            duration=60 if req.duration is None else int(req.duration),
        )
    except Exception as e:
        logger.exception("Error generating script")
        return error_response(str(e) or "Failed to generate script", 500)
    return GenerateScriptResponse(script=script, hooks=writer.alternative_hooks())


@app.post("/api/transcribe", response_model=TranscribeResponse)
def transcribe(req: TranscribeRequest) -> Any:
    try:
        result = Transcriber().transcribe(req.videoUrl or "")
    except InvalidVideoURL as e:
        return error_response(str(e), 400)
    except (MissingAPIKey, DownloadFailed, TranscriptionFailed) as e:
        return error_response(str(e), 500)
    except Exception as e:
        logger.exception("General transcription error")
        return error_response(f"Transcription service failed: {str(e) or 'Unknown error'}", 500)
    return TranscribeResponse(**result)


def _trends_error(e: Exception, fallback: str) -> JSONResponse:
    if isinstance(e, QuotaExceeded):
        return error_response("YouTube API quota exceeded", 429, retry_after=e.retry_after)
    if isinstance(e, MissingAPIKey):
        return error_response(str(e), 500)
    if isinstance(e, APIError):
        return error_response(str(e), e.status_code or 502)
    logger.exception(fallback)
    return error_response(fallback, 500)


@app.post("/api/trends/search", response_model=TrendsResponse)
def trends_search(req: TrendSearchRequest) -> Any:
    if not req.query:
        return error_response("Query is required", 400)
    try:
        videos = TrendResearcher().search(req.query)
    except Exception as e:
        return _trends_error(e, "Failed to search YouTube videos. Please try again later.")
    return {"videos": videos}


@app.post("/api/trends/popular", response_model=TrendsResponse)
def trends_popular(req: TrendPopularRequest) -> Any:
    try:
        videos = TrendResearcher().popular(
            category_id=req.categoryId, region_code=req.regionCode, max_results=req.maxResults
        )
    except Exception as e:
        return _trends_error(e, "Failed to fetch popular YouTube videos. Please try again later.")
    return {"videos": videos}

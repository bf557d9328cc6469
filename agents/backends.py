"""Tool backends used by the agent.

A backend exposes the three tools the agent can run: trend search,
transcription and script generation. Each returns the same JSON-shaped dict
the matching HTTP route returns, so the agent's formatters work with either
backend.

- LocalToolBackend calls the service objects in-process (the default).
- HttpToolBackend posts to the API routes of a running server, trying each
  configured base URL in order (OPENSCRIPT_API_URLS, comma separated).
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

import requests

from .llm_client import FriendliClient
from .script_writer import ScriptWriter
from .transcriber import Transcriber
from .youtube_trends import TrendResearcher

logger = logging.getLogger(__name__)

POPULAR_DEFAULTS = {"categoryId": "0", "regionCode": "US", "maxResults": 5}


class ToolError(RuntimeError):
    """A tool call failed; the message is safe to show to the user."""


class LocalToolBackend:
    def __init__(
        self,
        researcher: Optional[TrendResearcher] = None,
        transcriber: Optional[Transcriber] = None,
        writer: Optional[ScriptWriter] = None,
    ):
        self.researcher = researcher or TrendResearcher()
        self.transcriber = transcriber or Transcriber()
        self.writer = writer or ScriptWriter()

    def search_videos(self, query: str, search_type: str = "search") -> Dict[str, Any]:
        if search_type == "search":
            videos = self.researcher.search(query)
        else:
            videos = self.researcher.popular(
                category_id=POPULAR_DEFAULTS["categoryId"],
                region_code=POPULAR_DEFAULTS["regionCode"],
                max_results=POPULAR_DEFAULTS["maxResults"],
            )
        return {"videos": videos}

    def transcribe(self, video_url: str) -> Dict[str, Any]:
        return self.transcriber.transcribe(video_url)

    def generate_script(
        self, input_text: str, niche: str, tone: str, duration: float
    ) -> Dict[str, Any]:
        script = self.writer.generate(input_text, niche=niche, tone=tone, duration=duration)
        return {"script": script, "hooks": self.writer.alternative_hooks()}


class HttpToolBackend:
    """Calls the app's own routes over HTTP.

    Connection failures and HTTP 500 move on to the next base URL; any other
    error status raises ToolError with the route's error message.
    """

    def __init__(self, base_urls: Sequence[str], timeout: float = 120):
        urls = [u.strip().rstrip("/") for u in base_urls if u and u.strip()]
        if not urls:
            raise ValueError("HttpToolBackend needs at least one base URL")
        self.base_urls: List[str] = urls
        self.timeout = timeout

    def _post(self, path: str, body: Dict[str, Any], what: str) -> Dict[str, Any]:
        last_error: Optional[Exception] = None
        for base in self.base_urls:
            url = f"{base}{path}"
            try:
                resp = requests.post(url, json=body, timeout=self.timeout)
            except requests.RequestException as exc:
                logger.debug("%s unreachable: %s", url, exc)
                last_error = exc
                continue

            if resp.ok:
                return resp.json()

            try:
                payload = resp.json()
            except ValueError:
                payload = None
            message = payload.get("error") if isinstance(payload, dict) else None
            if resp.status_code == 500:
                logger.debug("%s answered 500: %s", url, message)
                last_error = ToolError(message or f"Failed to {what}")
                continue
            raise ToolError(message or f"Failed to {what}")

        if isinstance(last_error, ToolError):
            raise last_error
        raise ToolError(f"Could not connect to the OpenScript API ({last_error})")

    def search_videos(self, query: str, search_type: str = "search") -> Dict[str, Any]:
        if search_type == "search":
            return self._post("/api/trends/search", {"query": query}, "search YouTube")
        return self._post("/api/trends/popular", dict(POPULAR_DEFAULTS), "search YouTube")

    def transcribe(self, video_url: str) -> Dict[str, Any]:
        return self._post("/api/transcribe", {"videoUrl": video_url}, "transcribe video")

    def generate_script(
        self, input_text: str, niche: str, tone: str, duration: float
    ) -> Dict[str, Any]:
        body = {"inputText": input_text, "niche": niche, "tone": tone, "duration": duration}
        return self._post("/api/generate-script", body, "generate script")


def backend_from_env(llm: Optional[FriendliClient] = None) -> Any:
    """HTTP backend when OPENSCRIPT_API_URLS is set, in-process otherwise."""
    urls = os.environ.get("OPENSCRIPT_API_URLS", "")
    if urls.strip():
        return HttpToolBackend(urls.split(","))
    return LocalToolBackend(writer=ScriptWriter(llm=llm))


__all__ = ["LocalToolBackend", "HttpToolBackend", "ToolError", "backend_from_env"]

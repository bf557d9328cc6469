"""Friendli serverless completions client.

Thin wrapper over the `/v1/completions` endpoint shared by the agent's routing
and topic prompts and by the script writer. Quota and transient failures are
handled by `agents.quota.send_with_retries`.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from .errors import APIError, MissingAPIKey
from .quota import QuotaState, error_message, send_with_retries

logger = logging.getLogger(__name__)

FRIENDLI_COMPLETIONS_URL = "https://api.friendli.ai/serverless/v1/completions"
DEFAULT_MODEL = "meta-llama-3.1-8b-instruct"
CHAT_STOP = ["\n\nUser:", "\nUser:"]


class FriendliClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        state: Optional[QuotaState] = None,
        timeout: float = 30,
    ):
        self.api_key = api_key or os.environ.get("FRIENDLI_API_KEY")
        self.model = model or os.environ.get("FRIENDLI_MODEL", DEFAULT_MODEL)
        self.url = url or FRIENDLI_COMPLETIONS_URL
        self._state = state or QuotaState()
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def complete(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.1,
        top_p: float = 0.9,
        stop: Optional[List[str]] = None,
    ) -> str:
        """Return the first completion choice's text ('' when the model sent none)."""
        if not self.api_key:
            raise MissingAPIKey("Friendli", "FRIENDLI_API_KEY")

        body: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "top_p": top_p,
        }
        if stop:
            body["stop"] = stop
        headers = {"Authorization": f"Bearer {self.api_key}"}

        resp = send_with_retries(
            lambda: requests.post(self.url, json=body, headers=headers, timeout=self.timeout),
            service="friendli",
            state=self._state,
        )
        if resp.status_code >= 400:
            raise APIError(
                f"Friendli API error: {error_message(resp)}", status_code=resp.status_code
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise APIError("Invalid JSON from Friendli API") from exc

        choices = data.get("choices") or []
        if not choices:
            logger.debug("Friendli returned no choices")
            return ""
        return str(choices[0].get("text") or "")

    def chat(self, system_prompt: str, user_message: str, max_tokens: int = 500) -> str:
        """Single-turn instruction completion in the User/Assistant layout."""
        prompt = f"{system_prompt}\n\nUser: {user_message}\nAssistant:"
        return self.complete(prompt, max_tokens=max_tokens, temperature=0.1, stop=CHAT_STOP)

"""Small base class that centralizes prompt rendering and LLM access.

Services that talk to the model subclass AgentBase and call
`self.render_prompt(prompt_id, variables)` against the central prompts.json
store, then send the result through `self.llm`.
"""

from typing import Any, Dict, Optional

from . import prompts
from .llm_client import FriendliClient


class AgentBase:
    def __init__(
        self,
        llm: Optional[FriendliClient] = None,
        prompt_store: Optional[prompts.PromptStore] = None,
    ):
        self.llm = llm or FriendliClient()
        self._prompt_store = prompt_store

    @property
    def prompt_store(self) -> prompts.PromptStore:
        # resolve late so set_default_promptstore() affects existing agents
        return self._prompt_store or prompts.get_default_promptstore()

    def render_prompt(
        self, prompt_id: str, variables: Optional[Dict[str, Any]] = None
    ) -> str:
        return self.prompt_store.render(prompt_id, variables or {})

"""Viral short-form script generation.

Scripts come from the LLM using the `os-003` prompt; when the model is
unreachable or returns nothing, a template script is assembled from stock
hooks and calls-to-action so the caller always gets something usable.
"""

import logging
import random
import re
from typing import List, Optional

from .agent_base import AgentBase
from .errors import APIError, MissingAPIKey

logger = logging.getLogger(__name__)

SCRIPT_PROMPT_ID = "os-003"

HOOKS = [
    "Stop scrolling! This will change everything...",
    "You won't believe what I just discovered...",
    "This secret has been hidden for too long...",
    "POV: You're about to learn something incredible...",
    "Wait until you see what happens next...",
]

CTAS = [
    "Follow for more tips like this!",
    "Save this for later!",
    "Share with someone who needs this!",
    "Comment if this helped you!",
    "Double tap if you agree!",
]


def clean_script(text: str) -> str:
    text = (text or "").strip()
    text = re.sub(r"^Script:\s*", "", text, flags=re.IGNORECASE)
    return re.sub(r"\n\n+", "\n\n", text)


def fallback_script(
    input_text: str, niche: str, tone: str, duration: float, rng: Optional[random.Random] = None
) -> str:
    rng = rng or random.Random()
    hook = rng.choice(HOOKS)
    cta = rng.choice(CTAS)

    if duration <= 30:
        body = (
            f"Here's the key insight about {input_text}: it's all about timing and "
            "authenticity. This approach works because it connects with your audience "
            "on a deeper level."
        )
    elif duration <= 60:
        body = (
            f"Let me break down {input_text} for you. First, understand your audience. "
            "Second, create valuable content. Third, be consistent. This method has "
            "helped thousands of creators grow their following."
        )
    else:
        body = (
            f"Everything you need to know about {input_text}. The biggest mistake people "
            "make is overthinking it. Here's the step-by-step process: start with "
            "research, create authentic content, engage with your community, and stay "
            "consistent. The results speak for themselves."
        )

    return f"Hook (0-3s): {hook}\n\nMain Content: {body}\n\nCall-to-Action: {cta}"


class ScriptWriter(AgentBase):
    def generate(
        self,
        input_text: str,
        niche: str = "general",
        tone: str = "casual",
        duration: float = 60,
    ) -> str:
        """Write a script for `input_text`.

        MissingAPIKey propagates; every other model failure yields the
        template fallback.
        """
        prompt = self.render_prompt(
            SCRIPT_PROMPT_ID,
            {"input_text": input_text, "niche": niche, "tone": tone, "duration": duration},
        )
        try:
            raw = self.llm.complete(
                prompt,
                max_tokens=300,
                temperature=0.7,
                top_p=0.9,
                stop=["\n\nUser:", "\nUser:", "---"],
            )
        except MissingAPIKey:
            raise
        except APIError as exc:
            logger.warning("Script generation fell back to template: %s", exc)
            return fallback_script(input_text, niche, tone, duration)

        return clean_script(raw) or fallback_script(input_text, niche, tone, duration)

    @staticmethod
    def alternative_hooks(count: int = 3, rng: Optional[random.Random] = None) -> List[str]:
        rng = rng or random.Random()
        return rng.sample(HOOKS, min(count, len(HOOKS)))

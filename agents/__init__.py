# Agents package for OpenScript AI
from .agent_base import AgentBase
from .orchestrator import OpenScriptAgent
from .prompts import PromptStore, ps
from .youtube_trends import TrendResearcher

__all__ = ["OpenScriptAgent", "TrendResearcher", "PromptStore", "ps", "AgentBase"]

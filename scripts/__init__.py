"""scripts package initializer so the helpers can be run with
`python -m scripts.<name>` (validate_prompts, render_prompt, agent_smoke,
transcribe_smoke).

Expose the main validator symbol so linters and importers can reference it.
"""

from .validate_prompts import validate_prompts

__all__ = ["validate_prompts"]

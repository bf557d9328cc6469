"""PromptStore helper for loading and rendering prompts from prompts.json

Every LLM prompt the agent, the script writer and the topic extractor send
lives in prompts.json at the project root as a Jinja2 template. This module
loads them by id and renders them with a variables dict.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined, Undefined

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "prompts.json"
)

TONES = ("casual", "professional", "energetic", "educational")

_FALSY = ("0", "", "false", "False")


def _make_env(strict: bool = False) -> Environment:
    if strict:
        return Environment(undefined=StrictUndefined, keep_trailing_newline=True)
    return Environment(undefined=Undefined, keep_trailing_newline=True)


class PromptStore:
    def __init__(
        self,
        path: Optional[str] = None,
        strict: Optional[bool] = None,
        validate_schema: Optional[bool] = None,
    ):
        self.path = path or DEFAULT_PROMPTS_PATH
        # strict mode can be controlled by PROMPTS_STRICT env var or constructor arg
        if strict is None:
            strict = os.environ.get("PROMPTS_STRICT", "0") not in _FALSY
        self.strict = bool(strict)
        self.env = _make_env(self.strict)
        if validate_schema is None:
            validate_schema = os.environ.get("PROMPTS_VALIDATE_SCHEMA", "0") not in _FALSY
        self.validate_schema = bool(validate_schema)
        self._load()

    def _load(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("Could not load prompts from %s", self.path)
            data = {"prompts": []}
        self._prompt_list = data.get("prompts", [])
        self._prompts = {p.get("id"): p for p in self._prompt_list}
        if self.validate_schema:
            self._validate_prompts()

    def list_prompts(self) -> List[str]:
        return list(self._prompts.keys())

    def get(self, prompt_id: str) -> Optional[Dict[str, Any]]:
        return self._prompts.get(prompt_id)

    def render(self, prompt_id: str, variables: Dict[str, Any]) -> str:
        p = self.get(prompt_id)
        if not p:
            raise KeyError(f"prompt {prompt_id} not found")
        template = self.env.from_string(p.get("prompt_template", ""))
        # Jinja raises UndefinedError here in strict mode
        return str(template.render(**(variables or {})))

    def _validate_prompts(self) -> None:
        """Run lightweight schema validations on loaded prompts.

        Checks performed:
        - id and prompt_template are non-empty strings.
        - variables and tags are lists of strings.
        - Each prompt's example contains all declared variables.
        - Known variable types: duration -> int, tone -> one of TONES,
          user_message / input_text / niche -> str.
        - The example renders with non-strict Jinja2.
        Raises ValueError on validation failures.
        """
        for p in self._prompt_list:
            pid = p.get("id")
            if not pid or not isinstance(pid, str):
                raise ValueError(f"Prompt has invalid or missing id: {pid}")

            tpl_val = p.get("prompt_template")
            if not tpl_val or not isinstance(tpl_val, str):
                raise ValueError(f"Prompt {pid} missing or invalid prompt_template")

            vars_decl = p.get("variables", [])
            if not isinstance(vars_decl, list) or not all(
                isinstance(x, str) for x in vars_decl
            ):
                raise ValueError(f"Prompt {pid} variables must be a list of strings")
            vars_decl = set(vars_decl)
            example = p.get("example", {}) or {}
            missing = vars_decl - set(example.keys())
            if missing:
                raise ValueError(f"Prompt {pid} example missing variables: {missing}")

            tags = p.get("tags", [])
            if tags is not None and (
                not isinstance(tags, list) or not all(isinstance(t, str) for t in tags)
            ):
                raise ValueError(f"Prompt {pid} tags must be a list of strings")

            for str_field in ("user_message", "input_text", "niche"):
                if str_field in vars_decl:
                    v = example.get(str_field)
                    if v is not None and not isinstance(v, str):
                        raise ValueError(f"Prompt {pid} example {str_field} must be a string")

            if "duration" in vars_decl:
                v = example.get("duration")
                # bool is an int subclass but never a valid duration
                if v is not None and (isinstance(v, bool) or not isinstance(v, int)):
                    raise ValueError(f"Prompt {pid} example duration must be an integer")

            if "tone" in vars_decl:
                v = example.get("tone")
                if v is not None and v not in TONES:
                    raise ValueError(
                        f"Prompt {pid} example tone must be one of {', '.join(TONES)}"
                    )

            try:
                _make_env(strict=False).from_string(tpl_val).render(**example)
            except Exception as e:
                raise ValueError(f"Prompt {pid} example failed to render: {e}")


def set_default_promptstore(
    path: Optional[str] = None,
    strict: Optional[bool] = None,
    validate_schema: Optional[bool] = None,
) -> "PromptStore":
    """Set and return the module-level default PromptStore instance.

    Call this to programmatically override the default `ps` used by modules.
    """
    global ps
    ps = PromptStore(path=path, strict=strict, validate_schema=validate_schema)
    return ps


def get_default_promptstore() -> "PromptStore":
    return ps


ps = set_default_promptstore()

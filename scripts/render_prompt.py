#!/usr/bin/env python3
"""Render a prompt by id using the project's prompts.json.

Usage: python -m scripts.render_prompt <prompt_id> [variables.json]

Without a variables file the prompt's own example is used, which is handy for
eyeballing exactly what the agent sends to the model.
"""
import json
import sys
from typing import List

from agents.prompts import get_default_promptstore


def main(argv: List[str]) -> int:
    if len(argv) < 2:
        print("Usage: render_prompt.py <prompt_id> [variables.json]")
        return 2
    store = get_default_promptstore()
    pid = argv[1]
    prompt = store.get(pid)
    if prompt is None:
        print(f"prompt {pid} not found; known ids: {', '.join(store.list_prompts())}")
        return 3

    if len(argv) >= 3:
        with open(argv[2], "r", encoding="utf-8") as f:
            variables = json.load(f)
    else:
        variables = prompt.get("example") or {}

    print(store.render(pid, variables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))

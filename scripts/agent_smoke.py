#!/usr/bin/env python3
"""Send a handful of sample messages to a running OpenScript agent.

Usage:
  python -m scripts.agent_smoke [--url http://localhost:8000] [--delay 1.0]

Prints which tool the agent picked and a preview of its answer for each
message, then clears the conversation.
"""
from __future__ import annotations

import argparse
import time
from typing import Any, Dict, List, Optional

import requests

SAMPLE_MESSAGES = [
    "Find me trending videos about AI",
    "Can you transcribe this video: https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "Generate a 60-second viral script about productivity tips in a casual tone",
    "What makes a video go viral?",
    "Show me the most popular YouTube videos right now",
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser()
    p.add_argument("--url", default="http://localhost:8000", help="Base URL of the API server")
    p.add_argument("--delay", type=float, default=1.0, help="Seconds to wait between messages")
    p.add_argument("--timeout", type=float, default=300.0, help="Per-request timeout in seconds")
    return p.parse_args(argv)


def summarize(data: Dict[str, Any]) -> List[str]:
    lines: List[str] = []
    responses = data.get("responses") or []
    tool_msg = next((r for r in responses if r.get("role") == "tool"), None)
    reply = next((r for r in responses if r.get("role") == "assistant"), None)
    if tool_msg:
        lines.append(f"Tool used: {(tool_msg.get('toolCall') or {}).get('tool')}")
    if reply:
        lines.append(f"Response: {reply.get('content', '')[:100]}...")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    endpoint = args.url.rstrip("/") + "/api/agent"
    failures = 0

    print("Testing OpenScript AI agent at", endpoint)
    for i, message in enumerate(SAMPLE_MESSAGES, start=1):
        print(f'Test {i}: "{message}"')
        try:
            resp = requests.post(endpoint, json={"message": message}, timeout=args.timeout)
            data = resp.json()
            if resp.ok:
                print("OK")
                for line in summarize(data):
                    print("  " + line)
            else:
                failures += 1
                print("Failed:", data.get("error"))
        except (requests.RequestException, ValueError) as e:
            failures += 1
            print("Request failed:", e)
        print("-" * 60)
        time.sleep(args.delay)

    print("Clearing conversation...")
    try:
        resp = requests.post(endpoint, json={"action": "clear"}, timeout=args.timeout)
        print("Cleared" if resp.ok else f"Clear failed: HTTP {resp.status_code}")
    except requests.RequestException as e:
        print("Clear failed:", e)

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())

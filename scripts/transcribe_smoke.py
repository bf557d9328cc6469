#!/usr/bin/env python3
"""Send one video to a running server's /api/transcribe route.

Usage:
  python -m scripts.transcribe_smoke [--url http://localhost:8000] [--video URL]

Prints the video id, the transcript length and a short preview.
"""
from __future__ import annotations

import argparse
from typing import List, Optional

import requests

DEFAULT_VIDEO = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
PREVIEW_CHARS = 200


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser()
    p.add_argument("--url", default="http://localhost:8000", help="Base URL of the API server")
    p.add_argument("--video", default=DEFAULT_VIDEO, help="YouTube URL to transcribe")
    p.add_argument("--timeout", type=float, default=300.0, help="Request timeout in seconds")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    endpoint = args.url.rstrip("/") + "/api/transcribe"

    print("Testing transcription endpoint at", endpoint)
    print("Video URL:", args.video)
    try:
        resp = requests.post(endpoint, json={"videoUrl": args.video}, timeout=args.timeout)
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        print("Request failed:", e)
        return 1

    if not resp.ok:
        print("Transcription failed:", data.get("error"))
        return 1

    transcript = data.get("transcript") or ""
    print("Transcription successful")
    print("Video ID:", data.get("videoId"))
    print("Transcript length:", len(transcript), "characters")
    print("Transcript preview:", transcript[:PREVIEW_CHARS] + "...")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

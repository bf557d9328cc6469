"""Validate prompts.json files using PromptStore's validation logic.

Usage:
  python -m scripts.validate_prompts [--paths PATH [PATH ...]] [--strict] [--no-validate] [--autofix] [--report-json FILE]

Exit code 0 on success, non-zero on validation error.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from agents.prompts import TONES, PromptStore


def _autofix_file(path: Path) -> bool:
    """Apply safe fixes to a prompts.json file; returns True if it was modified.

    - A numeric-string example `duration` ("60") becomes an integer.
    - An example `tone` is lower-cased and stripped when that makes it a known tone.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False

    changed = False
    for p in data.get("prompts", []):
        example = p.get("example")
        if not isinstance(example, dict):
            continue
        duration = example.get("duration")
        if isinstance(duration, str) and duration.strip().isdigit():
            example["duration"] = int(duration.strip())
            changed = True
        tone = example.get("tone")
        if isinstance(tone, str) and tone not in TONES and tone.strip().lower() in TONES:
            example["tone"] = tone.strip().lower()
            changed = True

    if changed:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return changed


def validate_prompts(
    paths: List[str], strict: bool = False, validate: bool = True, autofix: bool = False
) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    for p in paths:
        path = Path(p) if p else Path("prompts.json")
        if not path.exists():
            results.append({"path": str(path), "ok": False, "error": "file not found"})
            continue

        fixed = _autofix_file(path) if autofix else False
        try:
            store = PromptStore(path=str(path), strict=strict, validate_schema=validate)
            results.append(
                {"path": str(path), "ok": True, "prompts": len(store.list_prompts()), "autofixed": fixed}
            )
        except ValueError as e:
            results.append({"path": str(path), "ok": False, "error": str(e), "autofixed": fixed})

    return results


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Validate prompts.json files")
    parser.add_argument("--paths", nargs="*", help="Paths to prompts.json files (defaults to prompts.json in repo root)")
    parser.add_argument("--strict", action="store_true", help="Use strict Jinja rendering for validation")
    parser.add_argument("--no-validate", dest="validate", action="store_false", help="Don't run schema validation")
    parser.add_argument("--autofix", action="store_true", help="Attempt safe autofixes before validation")
    parser.add_argument("--report-json", help="Write a JSON report of validation results to this file")
    args = parser.parse_args(argv)

    paths = args.paths or ["prompts.json"]
    results = validate_prompts(paths=paths, strict=args.strict, validate=args.validate, autofix=args.autofix)

    if args.report_json:
        try:
            Path(args.report_json).write_text(json.dumps(results, indent=2), encoding="utf-8")
        except OSError as e:
            print(f"Failed to write report: {e}", file=sys.stderr)

    failed = [r for r in results if not r.get("ok")]
    if failed:
        for f in failed:
            print(f"Validation failed for {f.get('path')}: {f.get('error')}", file=sys.stderr)
        sys.exit(2)

    print("Validation succeeded for all files")


if __name__ == "__main__":
    main()

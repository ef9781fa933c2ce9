#!/usr/bin/env python3
"""
Score one or more URLs from the command line without storing anything.

Prints one JSON verdict per line (same shape as POST /urls/scan data).
Exit code 2 when any URL is unsafe, 1 on invalid input.

Usage:
  py -m backend_safespace.tools.scan_url https://example.com http://bit.ly/x
"""

from __future__ import annotations

import argparse
import json
import sys

from backend_safespace.analytics import evaluate_url
from backend_safespace.core.exceptions import InvalidInput
from backend_safespace.scanner import validate_url


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Lexical URL risk check")
    parser.add_argument("urls", nargs="+", help="URLs to score")
    args = parser.parse_args(argv)

    any_unsafe = False
    for raw in args.urls:
        try:
            url = validate_url(raw)
        except InvalidInput as e:
            print(f"[scan_url] ERROR: {raw!r}: {e.message}", file=sys.stderr)
            return 1
        verdict = evaluate_url(url)
        any_unsafe = any_unsafe or not verdict.is_safe
        print(json.dumps({"url": url, **verdict.to_dict()}))
    return 2 if any_unsafe else 0


if __name__ == "__main__":
    sys.exit(main())

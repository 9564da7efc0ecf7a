#!/usr/bin/env python3
"""Run the document_browser test suite with Qt in offscreen mode.

Usage:
  python scripts/run_tests_offscreen.py [--timeout SECONDS] [--uv] [--] [pytest args...]

Examples:
  python scripts/run_tests_offscreen.py -- tests/test_thumbnail_fetcher.py -q
  python scripts/run_tests_offscreen.py --uv -- -k loader
"""

from __future__ import annotations

import argparse
import os
import shlex
import subprocess
import sys

PER_TEST_TIMEOUT = 60


def build_command(use_uv: bool, verbose: bool, pytest_args: list[str]) -> list[str]:
    python = ["uv", "run", "python"] if use_uv else [sys.executable]
    cmd = [*python, "-m", "pytest", f"--timeout={PER_TEST_TIMEOUT}"]
    if not verbose:
        cmd += ["-q", "--maxfail=1"]
    return cmd + [a for a in pytest_args if a != "--"]


def main() -> int:
    p = argparse.ArgumentParser(description="Run pytest with QT_QPA_PLATFORM=offscreen")
    p.add_argument("--timeout", type=int, default=300, help="Wall-clock limit for the whole run")
    p.add_argument("--uv", action="store_true", help="Run through 'uv run'")
    p.add_argument("--verbose", action="store_true", help="Don't pass -q")
    p.add_argument("pytest_args", nargs=argparse.REMAINDER)
    args = p.parse_args()

    env = os.environ.copy()
    env.setdefault("QT_QPA_PLATFORM", "offscreen")
    # Keep worker-thread debug chatter out of CI logs unless asked for.
    env.setdefault("DOCUMENT_BROWSER_LOG_LEVEL", "warning")

    cmd = build_command(args.uv, args.verbose, args.pytest_args)
    print("Running:", " ".join(shlex.quote(c) for c in cmd))
    try:
        return subprocess.run(cmd, env=env, check=False, timeout=args.timeout).returncode
    except subprocess.TimeoutExpired:
        print(f"pytest run timed out after {args.timeout} seconds", file=sys.stderr)
        return 124


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""Lint, type-check and test document_browser; exits non-zero on the first failure."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run(cmd: list[str]) -> int:
    print("=>", " ".join(cmd))
    return subprocess.run(cmd, cwd=ROOT, check=False).returncode


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--fix", action="store_true", help="Let ruff apply fixes")
    parser.add_argument("--no-tests", action="store_true", help="Skip pytest")
    args = parser.parse_args()

    steps: list[tuple[str, list[str]]] = [
        ("ruff", [sys.executable, "-m", "ruff", "check", *(["--fix"] if args.fix else []), "."]),
        ("pyright", [sys.executable, "-m", "pyright", "document_browser"]),
    ]
    if not args.no_tests:
        steps.append(("pytest", [sys.executable, str(ROOT / "scripts" / "run_tests_offscreen.py")]))

    for name, cmd in steps:
        rc = run(cmd)
        if rc != 0:
            print(f"{name} failed")
            return rc

    print("All checks passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

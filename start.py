"""
Convenience launcher — starts the rules engine API, optionally with a rules file.

Usage:
    python start.py                          # empty rule set
    python start.py --rules rules/shop.yml   # preload rule definitions
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys


def start_engine(rules_file: str | None) -> subprocess.Popen:
    env = dict(os.environ)
    if rules_file:
        env["RULES_RULES_FILE"] = os.path.abspath(rules_file)
    return subprocess.Popen(
        [sys.executable, "-m", "ruleengine.main"],
        stdout=sys.stdout,
        stderr=sys.stderr,
        env=env,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Start the rules engine API")
    parser.add_argument("--rules", help="YAML or JSON rule definitions to load at startup")
    args = parser.parse_args()

    print("Starting rules engine…")
    engine_proc = start_engine(args.rules)

    print("\nEngine → http://127.0.0.1:8765")
    print("Docs   → http://127.0.0.1:8765/docs")
    print("Press Ctrl+C to stop.\n")

    try:
        engine_proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down…")
        engine_proc.terminate()
        engine_proc.wait()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Standalone environment check script."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from asmcc.config import load_config
from asmcc.environment import detect_environment


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect the asmcc toolchain environment")
    parser.add_argument("--config", type=Path, help="Optional config override", default=None)
    parser.add_argument("--json", action="store_true", help="Emit JSON")
    args = parser.parse_args()

    config = load_config(args.config)
    report = detect_environment(config)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return

    print(f"Python: {report.python_version} ({report.platform})")
    print(f"Editor: {report.editor}")
    for tool in report.tools:
        status = "ok" if tool.available else "missing"
        detail = tool.version or tool.details or ""
        print(f" - {tool.name} [{tool.command}]: {status} {detail}")
    for note in report.notes:
        print(f"note: {note}")
    for issue in report.issues:
        print(f"ISSUE: {issue}")


if __name__ == "__main__":
    main()

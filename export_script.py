"""
Small CLI to turn a saved action list into a script without the GUI.

Usage:
    python export_script.py actions.json [ahk|python] [output]

The JSON file holds either a list of actions or an object with an
"actions" list. Without an output path the script goes to stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

from models import ExportFormat, MacroAction
from script_generator import generate_script

FORMAT_ALIASES = {
    "ahk": ExportFormat.AUTOHOTKEY,
    "autohotkey": ExportFormat.AUTOHOTKEY,
    "py": ExportFormat.PYTHON_PYAUTOGUI,
    "python": ExportFormat.PYTHON_PYAUTOGUI,
}


def load_actions(path: Path) -> List[MacroAction]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("actions", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of actions")
    return [MacroAction.from_dict(item) for item in data]


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python export_script.py actions.json [ahk|python] [output]", file=sys.stderr)
        return 2

    path = Path(args[0])
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 2

    fmt_name = args[1].lower() if len(args) > 1 else "ahk"
    export_format = FORMAT_ALIASES.get(fmt_name)
    if export_format is None:
        print(f"Unknown format '{fmt_name}' (use ahk or python)", file=sys.stderr)
        return 2

    try:
        actions = load_actions(path)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        print(f"Invalid action file: {exc}", file=sys.stderr)
        return 1

    script = generate_script(actions, export_format)
    if len(args) > 2:
        try:
            Path(args[2]).write_text(script, encoding="utf-8")
        except OSError as exc:
            print(f"Could not write {args[2]}: {exc}", file=sys.stderr)
            return 1
        print(f"Wrote {len(actions)} action(s) to {args[2]}")
    else:
        sys.stdout.write(script)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Script generator: turns a macro timeline into AutoHotkey or pyautogui code.

The output is a pure function of (actions, format, options). Absent action
fields fall back to fixed defaults so every action list produces a script.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from models import ActionType, ExportFormat, MacroAction, MouseButton, ScriptOptions

DEFAULT_DURATION_MS = 1000

_AHK_BUTTONS = {
    MouseButton.LEFT: "Left",
    MouseButton.RIGHT: "Right",
    MouseButton.MIDDLE: "Middle",
}


def generate_script(
    actions: Iterable[MacroAction],
    export_format: ExportFormat,
    options: Optional[ScriptOptions] = None,
) -> str:
    """Render the action sequence in the requested dialect."""
    opts = options or ScriptOptions()
    if export_format == ExportFormat.AUTOHOTKEY:
        return _generate_ahk(list(actions), opts)
    return _generate_python(list(actions), opts)


def suggested_filename(export_format: ExportFormat) -> str:
    return "macro" + export_format.file_extension


def format_seconds(milliseconds: int) -> str:
    """1000 -> "1", 1500 -> "1.5", 250 -> "0.25"."""
    seconds = milliseconds / 1000
    if seconds.is_integer():
        return str(int(seconds))
    return repr(seconds)


# AutoHotkey -----------------------------------------------------------

def _generate_ahk(actions: List[MacroAction], opts: ScriptOptions) -> str:
    lines: List[str] = [
        "; MacroForge Generated AutoHotkey Script",
        f"; Press {opts.start_hotkey} to Start, {opts.pause_hotkey} to Pause, {opts.exit_hotkey} to Exit",
        "",
        f"{opts.start_hotkey}::",
        "Loop {",
    ]
    for action in actions:
        lines.extend("    " + line for line in _ahk_lines(action, opts))
        if action.comment:
            lines.append(f"    ; {_single_line(action.comment)}")
    lines.extend([
        "}",
        "return",
        "",
        f"{opts.pause_hotkey}::Pause",
        f"{opts.exit_hotkey}::ExitApp",
    ])
    return "\n".join(lines)


def _ahk_lines(action: MacroAction, opts: ScriptOptions) -> List[str]:
    x, y = _coords(action)
    if action.type == ActionType.CLICK:
        button = _AHK_BUTTONS.get(action.button or MouseButton.LEFT, "Left")
        if action.jitter and opts.jitter_px > 0:
            j = opts.jitter_px
            return [
                f"Random, rx, -{j}, {j}",
                f"Random, ry, -{j}, {j}",
                f"Click, {x} + rx, {y} + ry, {button}",
            ]
        return [f"Click, {x}, {y}, {button}"]
    if action.type == ActionType.MOVE:
        return [f"MouseMove, {x}, {y}"]
    if action.type == ActionType.WAIT:
        return [f"Sleep, {_duration(action)}"]
    if action.type == ActionType.KEYPRESS:
        return [f"Send, {{{action.key if action.key is not None else 'Space'}}}"]
    return []


# Python / pyautogui ---------------------------------------------------

def _generate_python(actions: List[MacroAction], opts: ScriptOptions) -> str:
    lines: List[str] = [
        "import pyautogui",
        "import time",
        "import random",
        "",
        "# MacroForge Generated Python Script",
        "# Dependencies: pip install pyautogui",
        "",
        f'print("Macro starting in {opts.startup_delay_s} seconds... Switch to your target window.")',
        f"time.sleep({opts.startup_delay_s})",
        "",
        "try:",
        "    while True:",
    ]
    body: List[str] = []
    for action in actions:
        body.extend(_python_lines(action, opts))
    if not body:
        body.append("pass")
    lines.extend("        " + line for line in body)
    lines.extend([
        "except KeyboardInterrupt:",
        '    print("\\nStopped.")',
        "",
    ])
    return "\n".join(lines)


def _python_lines(action: MacroAction, opts: ScriptOptions) -> List[str]:
    x, y = _coords(action)
    if action.type == ActionType.CLICK:
        button = (action.button or MouseButton.LEFT).value
        if action.jitter and opts.jitter_px > 0:
            j = opts.jitter_px
            return [
                f"pyautogui.click({x} + random.randint(-{j}, {j}), "
                f"{y} + random.randint(-{j}, {j}), button={button!r})"
            ]
        return [f"pyautogui.click({x}, {y}, button={button!r})"]
    if action.type == ActionType.MOVE:
        return [f"pyautogui.moveTo({x}, {y})"]
    if action.type == ActionType.WAIT:
        return [f"time.sleep({format_seconds(_duration(action))})"]
    if action.type == ActionType.KEYPRESS:
        key = action.key.lower() if action.key is not None else "space"
        return [f"pyautogui.press({key!r})"]
    return []


# Shared helpers -------------------------------------------------------

def _coords(action: MacroAction):
    x = action.x if action.x is not None else 0
    y = action.y if action.y is not None else 0
    return x, y


def _duration(action: MacroAction) -> int:
    return action.duration if action.duration is not None else DEFAULT_DURATION_MS


def _single_line(text: str) -> str:
    return " ".join(text.splitlines())

"""Tests for AutoHotkey and pyautogui script generation."""

import pytest

from models import ActionType, ExportFormat, MacroAction, MouseButton, ScriptOptions
from script_generator import format_seconds, generate_script, suggested_filename


def click(x, y, button=MouseButton.LEFT, jitter=False, comment=None):
    return MacroAction(id="c", type=ActionType.CLICK, x=x, y=y, button=button, jitter=jitter, comment=comment)


def body_lines(script, indent):
    return [line[len(indent):] for line in script.splitlines() if line.startswith(indent) and line.strip()]


class TestAutoHotkey:

    def test_sample_macro(self):
        actions = [
            click(500, 300, jitter=True, comment="Open program"),
            MacroAction(id="w", type=ActionType.WAIT, duration=1500),
            MacroAction(id="k", type=ActionType.KEYPRESS, key="Enter"),
        ]
        script = generate_script(actions, ExportFormat.AUTOHOTKEY)
        assert script == "\n".join([
            "; MacroForge Generated AutoHotkey Script",
            "; Press F1 to Start, F2 to Pause, F3 to Exit",
            "",
            "F1::",
            "Loop {",
            "    Random, rx, -3, 3",
            "    Random, ry, -3, 3",
            "    Click, 500 + rx, 300 + ry, Left",
            "    ; Open program",
            "    Sleep, 1500",
            "    Send, {Enter}",
            "}",
            "return",
            "",
            "F2::Pause",
            "F3::ExitApp",
        ])

    @pytest.mark.parametrize("button, expected", [
        (MouseButton.LEFT, "Left"),
        (MouseButton.RIGHT, "Right"),
        (MouseButton.MIDDLE, "Middle"),
        (None, "Left"),
    ])
    def test_click_button_names(self, button, expected):
        script = generate_script([click(1, 2, button=button)], ExportFormat.AUTOHOTKEY)
        assert f"    Click, 1, 2, {expected}" in script.splitlines()

    def test_defaults_for_absent_fields(self):
        actions = [
            MacroAction(id="m", type=ActionType.MOVE),
            MacroAction(id="w", type=ActionType.WAIT),
            MacroAction(id="k", type=ActionType.KEYPRESS),
        ]
        lines = body_lines(generate_script(actions, ExportFormat.AUTOHOTKEY), "    ")
        assert lines == ["MouseMove, 0, 0", "Sleep, 1000", "Send, {Space}"]

    def test_loop_markers_emit_nothing(self):
        actions = [MacroAction(id="s", type=ActionType.LOOP_START), MacroAction(id="e", type=ActionType.LOOP_END)]
        assert generate_script(actions, ExportFormat.AUTOHOTKEY) == generate_script([], ExportFormat.AUTOHOTKEY)

    def test_multiline_comment_is_collapsed(self):
        script = generate_script(
            [MacroAction(id="w", type=ActionType.WAIT, duration=5, comment="first\nsecond")],
            ExportFormat.AUTOHOTKEY,
        )
        assert "    ; first second" in script.splitlines()

    def test_custom_options(self):
        options = ScriptOptions(jitter_px=7, start_hotkey="F5", pause_hotkey="F6", exit_hotkey="F7")
        script = generate_script([click(10, 20, jitter=True)], ExportFormat.AUTOHOTKEY, options)
        assert script.startswith("; MacroForge Generated AutoHotkey Script\n; Press F5 to Start, F6 to Pause, F7 to Exit")
        assert "    Random, rx, -7, 7" in script
        assert script.endswith("F6::Pause\nF7::ExitApp")

    def test_zero_jitter_emits_literal_coordinates(self):
        script = generate_script([click(10, 20, jitter=True)], ExportFormat.AUTOHOTKEY, ScriptOptions(jitter_px=0))
        assert "Random" not in script
        assert "    Click, 10, 20, Left" in script


class TestPython:

    def test_sample_macro(self):
        actions = [
            click(500, 300, jitter=True, comment="Open program"),
            MacroAction(id="w", type=ActionType.WAIT, duration=1500),
            MacroAction(id="k", type=ActionType.KEYPRESS, key="Enter"),
        ]
        script = generate_script(actions, ExportFormat.PYTHON_PYAUTOGUI)
        assert script == "\n".join([
            "import pyautogui",
            "import time",
            "import random",
            "",
            "# MacroForge Generated Python Script",
            "# Dependencies: pip install pyautogui",
            "",
            'print("Macro starting in 3 seconds... Switch to your target window.")',
            "time.sleep(3)",
            "",
            "try:",
            "    while True:",
            "        pyautogui.click(500 + random.randint(-3, 3), 300 + random.randint(-3, 3), button='left')",
            "        time.sleep(1.5)",
            "        pyautogui.press('enter')",
            "except KeyboardInterrupt:",
            '    print("\\nStopped.")',
            "",
        ])

    def test_literal_click_and_move(self):
        actions = [click(7, 8, button=MouseButton.RIGHT), MacroAction(id="m", type=ActionType.MOVE, x=3, y=4)]
        lines = body_lines(generate_script(actions, ExportFormat.PYTHON_PYAUTOGUI), "        ")
        assert lines == ["pyautogui.click(7, 8, button='right')", "pyautogui.moveTo(3, 4)"]

    def test_empty_body_gets_pass(self):
        script = generate_script([], ExportFormat.PYTHON_PYAUTOGUI)
        assert "    while True:\n        pass\nexcept KeyboardInterrupt:" in script
        compile(script, "<macro>", "exec")

    def test_generated_script_compiles(self):
        actions = [
            click(1, 2, jitter=True),
            MacroAction(id="k", type=ActionType.KEYPRESS, key="it's"),
            MacroAction(id="w", type=ActionType.WAIT, duration=250, comment="never emitted"),
        ]
        script = generate_script(actions, ExportFormat.PYTHON_PYAUTOGUI)
        assert "never emitted" not in script
        compile(script, "<macro>", "exec")

    def test_output_is_deterministic(self):
        actions = [click(1, 2, jitter=True), MacroAction(id="w", type=ActionType.WAIT, duration=10)]
        first = generate_script(actions, ExportFormat.PYTHON_PYAUTOGUI)
        assert generate_script(actions, ExportFormat.PYTHON_PYAUTOGUI) == first


@pytest.mark.parametrize("ms, expected", [(1000, "1"), (1500, "1.5"), (250, "0.25"), (0, "0"), (12345, "12.345")])
def test_format_seconds(ms, expected):
    assert format_seconds(ms) == expected


def test_suggested_filename():
    assert suggested_filename(ExportFormat.AUTOHOTKEY) == "macro.ahk"
    assert suggested_filename(ExportFormat.PYTHON_PYAUTOGUI) == "macro.py"

"""Tests for the macro data model and its JSON shape."""

import pytest

from models import (
    ActionType,
    ApplicationSettings,
    ExportFormat,
    MacroAction,
    MouseButton,
    ScriptOptions,
)


class TestMacroAction:

    def test_to_dict_omits_absent_fields(self):
        action = MacroAction(id="a1", type=ActionType.WAIT, duration=1500)
        assert action.to_dict() == {"id": "a1", "type": "WAIT", "duration": 1500, "jitter": False}

    def test_from_dict_restores_click(self):
        data = {"id": "c1", "type": "CLICK", "x": 10, "y": 20, "button": "right", "jitter": True, "comment": "Go"}
        action = MacroAction.from_dict(data)
        assert action.type == ActionType.CLICK
        assert (action.x, action.y) == (10, 20)
        assert action.button == MouseButton.RIGHT
        assert action.jitter is True
        assert action.comment == "Go"
        assert action.to_dict() == data

    def test_from_dict_tolerates_missing_and_bad_fields(self):
        action = MacroAction.from_dict({"id": "k", "type": "keypress", "x": "oops", "button": "thumb"})
        assert action.type == ActionType.KEYPRESS
        assert action.x is None
        assert action.button is None
        assert action.key is None

    def test_from_dict_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            MacroAction.from_dict({"id": "z", "type": "TELEPORT"})

    @pytest.mark.parametrize("action_type, expected", [
        (ActionType.CLICK, True),
        (ActionType.MOVE, True),
        (ActionType.WAIT, False),
        (ActionType.KEYPRESS, False),
        (ActionType.LOOP_START, False),
    ])
    def test_supports_coordinates(self, action_type, expected):
        assert MacroAction(id="x", type=action_type).supports_coordinates is expected

    def test_summary_mentions_values(self):
        click = MacroAction(id="c", type=ActionType.CLICK, x=5, y=6, jitter=True, comment="hi")
        assert click.summary() == "Click left @ (5, 6) ~jitter  # hi"
        assert MacroAction(id="w", type=ActionType.WAIT).summary() == "Wait 1000 ms"
        assert MacroAction(id="k", type=ActionType.KEYPRESS).summary() == "Press Space"


class TestSettingsModels:

    def test_export_format_metadata(self):
        assert ExportFormat.AUTOHOTKEY.file_extension == ".ahk"
        assert ExportFormat.PYTHON_PYAUTOGUI.file_extension == ".py"
        assert ExportFormat.PYTHON_PYAUTOGUI.label == "Python"

    def test_script_options_clamp_negative_values(self):
        options = ScriptOptions.from_dict({"jitter_px": -4, "startup_delay_s": "x"})
        assert options.jitter_px == 0
        assert options.startup_delay_s == 3

    def test_application_settings_round_trip(self):
        settings = ApplicationSettings(
            export_format=ExportFormat.PYTHON_PYAUTOGUI,
            script_options=ScriptOptions(jitter_px=5, start_hotkey="F5"),
            dark_mode_enabled=False,
            hide_window_on_capture=False,
            tip_model="some-model",
        )
        restored = ApplicationSettings.from_dict(settings.to_dict())
        assert restored == settings

    def test_application_settings_defaults(self):
        settings = ApplicationSettings.from_dict({})
        assert settings.export_format == ExportFormat.AUTOHOTKEY
        assert settings.script_options == ScriptOptions()
        assert settings.dark_mode_enabled is True


@pytest.mark.parametrize("raw, expected", [
    (True, True),
    (False, False),
    ("false", False),
    ("False", False),
    ("true", True),
    (0, False),
    (1, True),
    (None, False),
    ("maybe", False),
])
def test_jitter_flag_parsing(raw, expected):
    action = MacroAction.from_dict({"id": "c", "type": "CLICK", "jitter": raw})
    assert action.jitter is expected


def test_settings_flags_parse_strings():
    settings = ApplicationSettings.from_dict({"dark_mode_enabled": "false", "hide_window_on_capture": "nonsense"})
    assert settings.dark_mode_enabled is False
    assert settings.hide_window_on_capture is True

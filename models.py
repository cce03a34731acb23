"""
Domain models for MacroForge Studio.
Each class follows the Single Responsibility Principle (SRP).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Any, Optional


class ActionType(Enum):
    """Enumeration of supported macro steps."""
    CLICK = "CLICK"
    MOVE = "MOVE"
    WAIT = "WAIT"
    KEYPRESS = "KEYPRESS"
    # Reserved markers, never emitted by the generator
    LOOP_START = "LOOP_START"
    LOOP_END = "LOOP_END"


class MouseButton(Enum):
    """Mouse buttons a CLICK step can use."""
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class ExportFormat(Enum):
    """Target script dialects."""
    AUTOHOTKEY = "AUTOHOTKEY"
    PYTHON_PYAUTOGUI = "PYTHON_PYAUTOGUI"

    @property
    def label(self) -> str:
        return "AutoHotkey" if self is ExportFormat.AUTOHOTKEY else "Python"

    @property
    def file_extension(self) -> str:
        return ".ahk" if self is ExportFormat.AUTOHOTKEY else ".py"


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any, default: bool) -> bool:
    """JSON booleans as-is; "true"/"false" strings and 0/1 parsed; anything else is the default."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        return default
    if isinstance(value, int):
        return value != 0
    return default


@dataclass
class MacroAction:
    """
    A single step of a macro sequence.

    Only `id` and `type` are mandatory; every other field is optional and
    only meaningful for some action types. Consumers fall back to fixed
    defaults when a field is absent.
    """
    id: str
    type: ActionType
    x: Optional[int] = None
    y: Optional[int] = None
    button: Optional[MouseButton] = None
    key: Optional[str] = None
    duration: Optional[int] = None  # milliseconds
    repeat: Optional[int] = None
    jitter: bool = False
    comment: Optional[str] = None

    @property
    def supports_coordinates(self) -> bool:
        """True for steps that target a screen position."""
        return self.type in (ActionType.CLICK, ActionType.MOVE)

    def summary(self) -> str:
        """Short description for list views."""
        if self.type == ActionType.CLICK:
            button = (self.button or MouseButton.LEFT).value
            text = f"Click {button} @ ({self.x or 0}, {self.y or 0})"
            if self.jitter:
                text += " ~jitter"
        elif self.type == ActionType.MOVE:
            text = f"Move to ({self.x or 0}, {self.y or 0})"
        elif self.type == ActionType.WAIT:
            text = f"Wait {1000 if self.duration is None else self.duration} ms"
        elif self.type == ActionType.KEYPRESS:
            text = f"Press {self.key or 'Space'}"
        else:
            text = self.type.value
        if self.comment:
            text += f"  # {self.comment}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the action to primitive types, omitting absent fields."""
        data: Dict[str, Any] = {"id": self.id, "type": self.type.value}
        for name in ("x", "y", "key", "duration", "repeat", "comment"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.button is not None:
            data["button"] = self.button.value
        data["jitter"] = self.jitter
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MacroAction":
        """Create an action from a dictionary, tolerating missing fields."""
        button_raw = data.get("button")
        try:
            button = MouseButton(str(button_raw).lower()) if button_raw else None
        except ValueError:
            button = None

        key_raw = data.get("key")
        comment_raw = data.get("comment")

        return MacroAction(
            id=str(data.get("id", "")),
            type=ActionType(str(data.get("type", ActionType.WAIT.value)).upper()),
            x=_optional_int(data.get("x")),
            y=_optional_int(data.get("y")),
            button=button,
            key=str(key_raw) if key_raw not in (None, "") else None,
            duration=_optional_int(data.get("duration")),
            repeat=_optional_int(data.get("repeat")),
            jitter=_as_bool(data.get("jitter"), False),
            comment=str(comment_raw) if comment_raw is not None else None,
        )


@dataclass
class ScriptOptions:
    """Knobs for script generation. Defaults match the stock templates."""
    jitter_px: int = 3
    startup_delay_s: int = 3
    start_hotkey: str = "F1"
    pause_hotkey: str = "F2"
    exit_hotkey: str = "F3"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jitter_px": self.jitter_px,
            "startup_delay_s": self.startup_delay_s,
            "start_hotkey": self.start_hotkey,
            "pause_hotkey": self.pause_hotkey,
            "exit_hotkey": self.exit_hotkey,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ScriptOptions":
        jitter = _optional_int(data.get("jitter_px"))
        delay = _optional_int(data.get("startup_delay_s"))
        return ScriptOptions(
            jitter_px=max(0, jitter) if jitter is not None else 3,
            startup_delay_s=max(0, delay) if delay is not None else 3,
            start_hotkey=str(data.get("start_hotkey") or "F1"),
            pause_hotkey=str(data.get("pause_hotkey") or "F2"),
            exit_hotkey=str(data.get("exit_hotkey") or "F3"),
        )


@dataclass
class ApplicationSettings:
    """Persisted application preferences."""

    export_format: ExportFormat = ExportFormat.AUTOHOTKEY
    script_options: ScriptOptions = field(default_factory=ScriptOptions)
    dark_mode_enabled: bool = True
    hide_window_on_capture: bool = True
    tip_model: str = "gemini-3-flash-preview"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to primitive types for JSON storage."""
        return {
            "export_format": self.export_format.value,
            "script_options": self.script_options.to_dict(),
            "dark_mode_enabled": self.dark_mode_enabled,
            "hide_window_on_capture": self.hide_window_on_capture,
            "tip_model": self.tip_model,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ApplicationSettings":
        """Create settings instance from JSON dictionary."""
        options_data = data.get("script_options") or {}
        if not isinstance(options_data, dict):
            options_data = {}

        return ApplicationSettings(
            export_format=ExportFormat(str(data.get("export_format", ExportFormat.AUTOHOTKEY.value))),
            script_options=ScriptOptions.from_dict(options_data),
            dark_mode_enabled=_as_bool(data.get("dark_mode_enabled"), True),
            hide_window_on_capture=_as_bool(data.get("hide_window_on_capture"), True),
            tip_model=str(data.get("tip_model") or "gemini-3-flash-preview"),
        )

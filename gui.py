"""
Graphical user interface for MacroForge Studio.

Key capabilities
----------------
- Build a macro timeline of clicks, moves, waits and key presses
- Capture the desktop (or load a screenshot) as a reference image
- Pick click/move coordinates on the reference with a crosshair overlay
- Preview, copy and save the generated AutoHotkey or Python script
- Ask a hosted model for one tip on making the macro more robust
"""

from __future__ import annotations

import os
import shutil
import sys
import tkinter as tk
from tkinter import ttk, messagebox, scrolledtext, filedialog
from typing import Optional, Dict, Tuple

from action_list import ActionList, default_actions
from coordinate_picker import PickResult, PickerSession
from logger import LogEntry, StatusLogger
from models import ActionType, ApplicationSettings, ExportFormat, MacroAction, MouseButton, ScriptOptions
from picker_overlay import CoordinatePickerOverlay
from screen_capture import ScreenCaptureService
from script_generator import generate_script, suggested_filename
from settings_manager import SettingsManager
from tip_service import TipService


class MacroForgeGUI:
    """Tkinter based GUI that orchestrates all application services."""

    DEFAULT_WINDOW_SIZE = (1280, 860)
    MIN_WINDOW_SIZE = (1020, 700)
    WINDOW_MARGIN = (48, 80)
    ADD_BUTTONS = (
        ("+ Click", ActionType.CLICK),
        ("+ Wait", ActionType.WAIT),
        ("+ Key", ActionType.KEYPRESS),
        ("+ Move", ActionType.MOVE),
    )

    def __init__(self, root: tk.Tk):
        self.root = root
        self.root.title("MacroForge Studio")
        self._configure_window_geometry()

        self.logger = StatusLogger()
        self.settings_manager = SettingsManager(log=self._log_message_later)
        self.settings: ApplicationSettings = self.settings_manager.load()

        self.style = ttk.Style()
        self.dark_mode_var = tk.BooleanVar(value=self.settings.dark_mode_enabled)
        self._configure_styles()

        # Runtime state --------------------------------------------------
        self.action_list = ActionList(default_actions())
        self.capture_service = ScreenCaptureService(
            root, log=self._log_message, hide_window=self.settings.hide_window_on_capture
        )
        self.picker_session = PickerSession()
        self.picker_overlay = CoordinatePickerOverlay(
            root, self.picker_session, on_commit=self._on_pick_committed, on_cancel=self._on_pick_cancelled
        )
        self.tip_service = TipService(model=self.settings.tip_model, log=self._log_message_later)

        self._persist_suspended = True
        self._loading_editor = False
        self._selected_id: Optional[str] = None
        self._listbox_ids: list[str] = []

        # Tk variables ---------------------------------------------------
        options = self.settings.script_options
        self.export_format_var = tk.StringVar(value=self.settings.export_format.value)
        self.capture_button_var = tk.StringVar(value="1. Capture Screen First")
        self.tip_button_var = tk.StringVar(value="AI Suggestion")
        self.tip_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="Status: Ready")
        self.action_count_var = tk.StringVar(value="")
        self.reference_info_var = tk.StringVar(value="No reference image - step 1 required")
        self.hide_on_capture_var = tk.BooleanVar(value=self.settings.hide_window_on_capture)

        self.editor_type_var = tk.StringVar(value="No action selected")
        self.edit_x_var = tk.StringVar(value="")
        self.edit_y_var = tk.StringVar(value="")
        self.edit_button_var = tk.StringVar(value=MouseButton.LEFT.value)
        self.edit_jitter_var = tk.BooleanVar(value=False)
        self.edit_duration_var = tk.StringVar(value="")
        self.edit_key_var = tk.StringVar(value="")
        self.edit_comment_var = tk.StringVar(value="")

        self.jitter_px_var = tk.StringVar(value=str(options.jitter_px))
        self.startup_delay_var = tk.StringVar(value=str(options.startup_delay_s))
        self.start_hotkey_var = tk.StringVar(value=options.start_hotkey)
        self.pause_hotkey_var = tk.StringVar(value=options.pause_hotkey)
        self.exit_hotkey_var = tk.StringVar(value=options.exit_hotkey)

        self._build_ui()
        self._apply_theme()
        self.logger.subscribe(self._show_log_entry)
        self._bind_editor_traces()

        self.action_list.subscribe(self._on_actions_changed)
        self._on_actions_changed()
        self._select_action(None)
        self._on_reference_changed()

        self.root.protocol("WM_DELETE_WINDOW", self._on_closing)
        self._persist_suspended = False
        self._log_message("MacroForge Studio ready. Capture the screen to start picking coordinates.")
        self._check_platform_hints()

    # ------------------------------------------------------------------
    # Window & theme
    # ------------------------------------------------------------------
    def _configure_window_geometry(self) -> None:
        """Adapt the main window to the active monitor resolution."""
        screen_bounds = self._get_virtual_screen_bounds()
        screen_width = max(int(screen_bounds[2]), 1)
        screen_height = max(int(screen_bounds[3]), 1)
        margin_x, margin_y = self.WINDOW_MARGIN

        usable_width = max(screen_width - margin_x, 800)
        usable_height = max(screen_height - margin_y, 600)

        default_width, default_height = self.DEFAULT_WINDOW_SIZE
        min_width, min_height = self.MIN_WINDOW_SIZE

        width = max(min(default_width, usable_width), min(min_width, usable_width))
        height = max(min(default_height, usable_height), min(min_height, usable_height))

        x = max((screen_width - width) // 2 + int(screen_bounds[0]), int(screen_bounds[0]))
        y = max((screen_height - height) // 2 + int(screen_bounds[1]), int(screen_bounds[1]))

        self.root.geometry(f"{int(width)}x{int(height)}+{int(x)}+{int(y)}")
        self.root.minsize(min(min_width, int(width)), min(min_height, int(height)))

    def _get_virtual_screen_bounds(self) -> Tuple[int, int, int, int]:
        """Return (x, y, width, height) of the primary monitor if known."""
        try:
            from screeninfo import get_monitors  # type: ignore
            mons = get_monitors()
            if not mons:
                raise RuntimeError("no monitors reported")
            primary = next((m for m in mons if getattr(m, "is_primary", False)), mons[0])
            return int(primary.x), int(primary.y), int(primary.width), int(primary.height)
        except Exception:
            # Fallback to Tk single screen
            try:
                return 0, 0, int(self.root.winfo_screenwidth()), int(self.root.winfo_screenheight())
            except tk.TclError:
                return 0, 0, 1280, 800

    def _configure_styles(self) -> None:
        try:
            self.style.theme_use("clam")
        except tk.TclError:
            pass

        self.style.configure(".", font=("Segoe UI", 10))
        self.style.configure("Header.TLabel", font=("Segoe UI", 15, "bold"))
        self.style.configure("HeaderSubtitle.TLabel", font=("Segoe UI", 10))
        self.style.configure("Card.TLabelframe", borderwidth=1, relief="solid")
        self.style.configure("Card.TLabelframe.Label", font=("Segoe UI", 11, "bold"))
        self.style.configure("AccentCard.TLabelframe", borderwidth=1, relief="solid")
        self.style.configure("AccentCard.TLabelframe.Label", font=("Segoe UI", 10, "bold"))
        self.style.configure("Accent.TButton", padding=(10, 7), borderwidth=0)
        self.style.configure("Danger.TButton", padding=(8, 6), borderwidth=0)
        self.style.configure("Ghost.TButton", padding=(8, 6), borderwidth=0)
        self.style.configure("Format.TRadiobutton", padding=(10, 4))

    def _get_palette(self, dark: bool) -> Dict[str, str]:
        if dark:
            return {
                "app_bg": "#0f172a",
                "card_bg": "#1e293b",
                "header_bg": "#0b1220",
                "accent_card_bg": "#1e1b4b",
                "accent_outline": "#6366f1",
                "text_primary": "#f1f5f9",
                "text_secondary": "#cbd5e1",
                "text_muted": "#64748b",
                "border_color": "#334155",
                "accent_color": "#2563eb",
                "accent_hover": "#3b82f6",
                "accent_active": "#1d4ed8",
                "accent_disabled": "#1e3a8a",
                "text_on_accent": "#ffffff",
                "text_on_disabled": "#93c5fd",
                "danger_color": "#b91c1c",
                "danger_hover": "#dc2626",
                "ghost_bg": "#1e293b",
                "ghost_hover": "#273549",
                "ghost_active": "#334155",
                "list_bg": "#0f172a",
                "list_fg": "#e2e8f0",
                "code_bg": "#020617",
                "code_fg": "#cbd5e1",
                "entry_bg": "#0f172a",
                "entry_fg": "#f1f5f9",
                "warning_fg": "#f59e0b",
            }
        return {
            "app_bg": "#f1f5f9",
            "card_bg": "#fdfdfe",
            "header_bg": "#e2e8f0",
            "accent_card_bg": "#eef2ff",
            "accent_outline": "#4f46e5",
            "text_primary": "#0f172a",
            "text_secondary": "#334155",
            "text_muted": "#64748b",
            "border_color": "#cbd5e1",
            "accent_color": "#2563eb",
            "accent_hover": "#3b82f6",
            "accent_active": "#1e40af",
            "accent_disabled": "#93c5fd",
            "text_on_accent": "#f8fafc",
            "text_on_disabled": "#dbeafe",
            "danger_color": "#dc2626",
            "danger_hover": "#ef4444",
            "ghost_bg": "#e2e8f0",
            "ghost_hover": "#cbd5e1",
            "ghost_active": "#94a3b8",
            "list_bg": "#fdfdfe",
            "list_fg": "#0f172a",
            "code_bg": "#f8fafc",
            "code_fg": "#0f172a",
            "entry_bg": "#fdfdfe",
            "entry_fg": "#0f172a",
            "warning_fg": "#b45309",
        }

    def _apply_theme(self) -> None:
        palette = self._get_palette(self.dark_mode_var.get())
        self._current_palette = palette

        self.root.configure(background=palette["app_bg"])

        self.style.configure("TFrame", background=palette["card_bg"])
        self.style.configure("TLabel", background=palette["card_bg"], foreground=palette["text_primary"])
        self.style.configure("TEntry", fieldbackground=palette["entry_bg"], foreground=palette["entry_fg"])
        self.style.configure("TSpinbox", fieldbackground=palette["entry_bg"], foreground=palette["entry_fg"])
        self.style.configure("TCombobox", fieldbackground=palette["entry_bg"], foreground=palette["entry_fg"])
        self.style.configure("TCheckbutton", background=palette["card_bg"], foreground=palette["text_primary"])
        self.style.configure("Background.TFrame", background=palette["app_bg"])
        self.style.configure("Header.TFrame", background=palette["header_bg"])
        self.style.configure("Header.TLabel", background=palette["header_bg"], foreground=palette["text_primary"])
        self.style.configure("HeaderSubtitle.TLabel", background=palette["header_bg"], foreground=palette["text_muted"])
        self.style.configure("Header.TCheckbutton", background=palette["header_bg"], foreground=palette["text_secondary"])
        self.style.configure(
            "Card.TLabelframe",
            background=palette["card_bg"],
            lightcolor=palette["border_color"],
            darkcolor=palette["border_color"],
            bordercolor=palette["border_color"],
        )
        self.style.configure("Card.TLabelframe.Label", background=palette["card_bg"], foreground=palette["text_primary"])
        self.style.configure(
            "AccentCard.TLabelframe",
            background=palette["accent_card_bg"],
            bordercolor=palette["accent_outline"],
        )
        self.style.configure("AccentCard.TLabelframe.Label", background=palette["accent_card_bg"], foreground=palette["accent_outline"])
        self.style.configure("AccentCard.TLabel", background=palette["accent_card_bg"], foreground=palette["text_secondary"])
        self.style.configure("Secondary.TLabel", background=palette["card_bg"], foreground=palette["text_secondary"])
        self.style.configure("Hint.TLabel", background=palette["card_bg"], foreground=palette["text_muted"])
        self.style.configure("Warning.TLabel", background=palette["card_bg"], foreground=palette["warning_fg"])

        self.style.configure("Accent.TButton", background=palette["accent_color"], foreground=palette["text_on_accent"])
        self.style.map(
            "Accent.TButton",
            background=[
                ("disabled", palette["accent_disabled"]),
                ("pressed", palette["accent_active"]),
                ("active", palette["accent_hover"]),
            ],
            foreground=[("disabled", palette["text_on_disabled"])],
        )
        self.style.configure("Danger.TButton", background=palette["danger_color"], foreground=palette["text_on_accent"])
        self.style.map("Danger.TButton", background=[("active", palette["danger_hover"])])
        self.style.configure("Ghost.TButton", background=palette["ghost_bg"], foreground=palette["text_primary"])
        self.style.map(
            "Ghost.TButton",
            background=[("pressed", palette["ghost_active"]), ("active", palette["ghost_hover"])],
        )
        self.style.configure("Format.TRadiobutton", background=palette["header_bg"], foreground=palette["text_secondary"])
        self.style.map(
            "Format.TRadiobutton",
            background=[("selected", palette["accent_color"]), ("active", palette["ghost_hover"])],
            foreground=[("selected", palette["text_on_accent"])],
        )

        self._apply_widget_theme()

    def _apply_widget_theme(self) -> None:
        palette = self._current_palette
        if hasattr(self, "action_listbox"):
            self.action_listbox.configure(
                bg=palette["list_bg"],
                fg=palette["list_fg"],
                selectbackground=palette["accent_color"],
                selectforeground=palette["text_on_accent"],
                highlightbackground=palette["border_color"],
                relief=tk.FLAT,
            )
        if hasattr(self, "preview_text"):
            self.preview_text.configure(
                background=palette["code_bg"], foreground=palette["code_fg"], insertbackground=palette["code_fg"]
            )
        if hasattr(self, "log_text"):
            self.log_text.configure(
                background=palette["code_bg"], foreground=palette["text_primary"], insertbackground=palette["text_primary"]
            )

    def _on_dark_mode_toggle(self) -> None:
        self._apply_theme()
        self._persist_settings()

    # ------------------------------------------------------------------
    # UI construction helpers
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = ttk.Frame(self.root, padding=14, style="Background.TFrame")
        container.grid(row=0, column=0, sticky="nsew")
        container.columnconfigure(0, weight=3, minsize=460)
        container.columnconfigure(1, weight=2, minsize=420)
        container.rowconfigure(1, weight=1)
        container.rowconfigure(2, weight=0)

        self._build_header(container)

        left = ttk.Frame(container, style="Background.TFrame")
        left.grid(row=1, column=0, sticky="nsew", padx=(0, 12), pady=(12, 0))
        left.columnconfigure(0, weight=1)
        left.rowconfigure(0, weight=1)
        self._build_timeline_section(left)
        self._build_editor_section(left)
        self._build_tip_section(left)

        right = ttk.Frame(container, style="Background.TFrame")
        right.grid(row=1, column=1, sticky="nsew", pady=(12, 0))
        right.columnconfigure(0, weight=1)
        right.rowconfigure(0, weight=1)
        self._build_preview_section(right)
        self._build_options_section(right)

        status_container = ttk.Frame(container, style="Background.TFrame")
        status_container.grid(row=2, column=0, columnspan=2, sticky="nsew", pady=(12, 0))
        status_container.columnconfigure(0, weight=1)
        self._build_status_section(status_container)

    def _build_header(self, parent: ttk.Frame) -> None:
        hero = ttk.Frame(parent, style="Header.TFrame", padding=(16, 12))
        hero.grid(row=0, column=0, columnspan=2, sticky="ew")
        hero.columnconfigure(0, weight=1)

        title = ttk.Frame(hero, style="Header.TFrame")
        title.grid(row=0, column=0, sticky="w")
        ttk.Label(title, text="MacroForge", style="Header.TLabel").pack(side=tk.LEFT)
        ttk.Label(title, text="Studio", style="HeaderSubtitle.TLabel").pack(side=tk.LEFT, padx=(8, 0), pady=(6, 0))

        toolbar = ttk.Frame(hero, style="Header.TFrame")
        toolbar.grid(row=0, column=1, sticky="e")

        self.capture_button = ttk.Button(
            toolbar, textvariable=self.capture_button_var, command=self._capture_screen, style="Accent.TButton"
        )
        self.capture_button.grid(row=0, column=0, padx=4)
        ttk.Button(toolbar, text="Load Screenshot…", command=self._load_reference_image, style="Ghost.TButton").grid(
            row=0, column=1, padx=4
        )
        self.save_reference_button = ttk.Button(
            toolbar, text="Save Screenshot…", command=self._save_reference_image, style="Ghost.TButton"
        )
        self.save_reference_button.grid(row=0, column=2, padx=4)
        self.tip_button = ttk.Button(
            toolbar, textvariable=self.tip_button_var, command=self._request_tip, style="Ghost.TButton"
        )
        self.tip_button.grid(row=0, column=3, padx=4)

        formats = ttk.Frame(toolbar, style="Header.TFrame")
        formats.grid(row=0, column=4, padx=(12, 4))
        for col, fmt in enumerate(ExportFormat):
            ttk.Radiobutton(
                formats,
                text=fmt.label,
                value=fmt.value,
                variable=self.export_format_var,
                command=self._on_format_changed,
                style="Format.TRadiobutton",
            ).grid(row=0, column=col)

        ttk.Checkbutton(
            toolbar, text="Dark", variable=self.dark_mode_var, command=self._on_dark_mode_toggle, style="Header.TCheckbutton"
        ).grid(row=0, column=5, padx=(8, 0))
        ttk.Checkbutton(
            toolbar,
            text="Hide window on capture",
            variable=self.hide_on_capture_var,
            command=self._on_hide_on_capture_toggle,
            style="Header.TCheckbutton",
        ).grid(row=1, column=0, columnspan=3, sticky="w", padx=4, pady=(6, 0))

    def _build_timeline_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Macro Timeline", padding=12, style="Card.TLabelframe")
        frame.grid(row=0, column=0, sticky="nsew")
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(2, weight=1)

        header = ttk.Frame(frame)
        header.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 8))
        header.columnconfigure(0, weight=1)
        self.reference_label = ttk.Label(header, textvariable=self.reference_info_var, style="Warning.TLabel")
        self.reference_label.grid(row=0, column=0, sticky="w")
        ttk.Label(header, textvariable=self.action_count_var, style="Secondary.TLabel").grid(row=0, column=1, sticky="e")

        add_row = ttk.Frame(frame)
        add_row.grid(row=1, column=0, columnspan=2, sticky="ew", pady=(0, 8))
        for col, (label, action_type) in enumerate(self.ADD_BUTTONS):
            add_row.columnconfigure(col, weight=1)
            ttk.Button(
                add_row, text=label, style="Ghost.TButton", command=lambda t=action_type: self._add_action(t)
            ).grid(row=0, column=col, sticky="ew", padx=2)

        self.action_listbox = tk.Listbox(
            frame,
            height=10,
            font=("Consolas", 10),
            bd=0,
            highlightthickness=1,
            selectmode=tk.SINGLE,
            exportselection=False,
        )
        self.action_listbox.grid(row=2, column=0, sticky="nsew")
        self.action_listbox.bind("<<ListboxSelect>>", self._on_listbox_select)
        self.action_listbox.bind("<Delete>", lambda _e: self._remove_selected())
        self.action_listbox.bind("<Button-3>", self._show_context_menu)

        scrollbar = ttk.Scrollbar(frame, orient=tk.VERTICAL, command=self.action_listbox.yview)
        scrollbar.grid(row=2, column=1, sticky="ns")
        self.action_listbox.configure(yscrollcommand=scrollbar.set)

        self.empty_hint = ttk.Label(frame, text="Start by adding an action above", style="Hint.TLabel")

        reorder = ttk.Frame(frame)
        reorder.grid(row=4, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        buttons = [
            ("Duplicate", self._duplicate_selected, "Ghost.TButton"),
            ("▲ Up", lambda: self._move_selected(-1), "Ghost.TButton"),
            ("▼ Down", lambda: self._move_selected(1), "Ghost.TButton"),
            ("⤒ Top", lambda: self._move_selected_to("top"), "Ghost.TButton"),
            ("⤓ Bottom", lambda: self._move_selected_to("bottom"), "Ghost.TButton"),
            ("Remove", self._remove_selected, "Danger.TButton"),
            ("Clear", self._clear_actions, "Ghost.TButton"),
        ]
        for col, (label, command, style) in enumerate(buttons):
            reorder.columnconfigure(col, weight=1)
            ttk.Button(reorder, text=label, command=command, style=style).grid(row=0, column=col, sticky="ew", padx=2)

        self._context_menu = tk.Menu(self.root, tearoff=0)
        self._context_menu.add_command(label="Pick from screen", command=self._start_pick)
        self._context_menu.add_command(label="Duplicate", command=self._duplicate_selected)
        self._context_menu.add_command(label="Remove", command=self._remove_selected)
        self._context_menu.add_separator()
        self._context_menu.add_command(label="▲ Up", command=lambda: self._move_selected(-1))
        self._context_menu.add_command(label="▼ Down", command=lambda: self._move_selected(1))

    def _build_editor_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Selected Action", padding=12, style="Card.TLabelframe")
        frame.grid(row=1, column=0, sticky="ew", pady=(12, 0))
        frame.columnconfigure(1, weight=1)
        frame.columnconfigure(3, weight=1)
        self.editor_frame = frame

        ttk.Label(frame, textvariable=self.editor_type_var, font=("Segoe UI", 10, "bold")).grid(
            row=0, column=0, columnspan=4, sticky="w", pady=(0, 8)
        )

        # Coordinates row (CLICK / MOVE)
        self._coord_widgets = []
        lbl_x = ttk.Label(frame, text="X Coord:")
        ent_x = ttk.Entry(frame, textvariable=self.edit_x_var, width=8)
        lbl_y = ttk.Label(frame, text="Y Coord:")
        ent_y = ttk.Entry(frame, textvariable=self.edit_y_var, width=8)
        self.pick_button = ttk.Button(frame, text="⌖ Pick from screen", command=self._start_pick, style="Accent.TButton")
        lbl_x.grid(row=1, column=0, sticky="w")
        ent_x.grid(row=1, column=1, sticky="ew", padx=(4, 12))
        lbl_y.grid(row=1, column=2, sticky="w")
        ent_y.grid(row=1, column=3, sticky="ew", padx=(4, 0))
        self.pick_button.grid(row=1, column=4, padx=(8, 0))
        self._coord_widgets.extend([lbl_x, ent_x, lbl_y, ent_y, self.pick_button])

        # Click options row
        lbl_btn = ttk.Label(frame, text="Button:")
        cb_btn = ttk.Combobox(
            frame,
            textvariable=self.edit_button_var,
            state="readonly",
            values=[b.value for b in MouseButton],
            width=8,
        )
        chk_jitter = ttk.Checkbutton(frame, text="Jitter (human-like offset)", variable=self.edit_jitter_var)
        lbl_btn.grid(row=2, column=0, sticky="w", pady=(6, 0))
        cb_btn.grid(row=2, column=1, sticky="ew", padx=(4, 12), pady=(6, 0))
        chk_jitter.grid(row=2, column=2, columnspan=2, sticky="w", pady=(6, 0))
        self._click_widgets = [lbl_btn, cb_btn, chk_jitter]

        # Wait row
        lbl_dur = ttk.Label(frame, text="Duration (ms):")
        spin_dur = ttk.Spinbox(frame, from_=0, to=3600000, increment=100, textvariable=self.edit_duration_var, width=10)
        lbl_dur.grid(row=3, column=0, sticky="w", pady=(6, 0))
        spin_dur.grid(row=3, column=1, sticky="ew", padx=(4, 12), pady=(6, 0))
        self._wait_widgets = [lbl_dur, spin_dur]

        # Keypress row
        lbl_key = ttk.Label(frame, text="Key:")
        ent_key = ttk.Entry(frame, textvariable=self.edit_key_var, width=14)
        hint_key = ttk.Label(frame, text="e.g. Enter, Space, a", style="Hint.TLabel")
        lbl_key.grid(row=4, column=0, sticky="w", pady=(6, 0))
        ent_key.grid(row=4, column=1, sticky="ew", padx=(4, 12), pady=(6, 0))
        hint_key.grid(row=4, column=2, columnspan=2, sticky="w", pady=(6, 0))
        self._key_widgets = [lbl_key, ent_key, hint_key]

        # Comment row (all types)
        lbl_comment = ttk.Label(frame, text="Comment:")
        ent_comment = ttk.Entry(frame, textvariable=self.edit_comment_var)
        lbl_comment.grid(row=5, column=0, sticky="w", pady=(6, 0))
        ent_comment.grid(row=5, column=1, columnspan=4, sticky="ew", padx=(4, 0), pady=(6, 0))
        self._comment_widgets = [lbl_comment, ent_comment]

    def _build_tip_section(self, parent: ttk.Frame) -> None:
        self.tip_frame = ttk.LabelFrame(parent, text="AI Expert Advice", padding=10, style="AccentCard.TLabelframe")
        self.tip_frame.columnconfigure(0, weight=1)
        ttk.Label(
            self.tip_frame, textvariable=self.tip_var, style="AccentCard.TLabel", wraplength=520, font=("Segoe UI", 10, "italic")
        ).grid(row=0, column=0, sticky="w")
        # Shown once a tip arrives
        self.tip_frame.grid(row=2, column=0, sticky="ew", pady=(12, 0))
        self.tip_frame.grid_remove()

    def _build_preview_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Script Preview", padding=12, style="Card.TLabelframe")
        frame.grid(row=0, column=0, sticky="nsew")
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(1, weight=1)

        bar = ttk.Frame(frame)
        bar.grid(row=0, column=0, sticky="ew", pady=(0, 8))
        bar.columnconfigure(0, weight=1)
        ttk.Label(bar, text="Ready to run offline", style="Hint.TLabel").grid(row=0, column=0, sticky="w")
        ttk.Button(bar, text="Copy Script", command=self._copy_script, style="Accent.TButton").grid(row=0, column=1, padx=(4, 0))
        ttk.Button(bar, text="Save Script…", command=self._save_script, style="Ghost.TButton").grid(row=0, column=2, padx=(4, 0))

        self.preview_text = scrolledtext.ScrolledText(frame, height=20, wrap=tk.NONE, font=("Consolas", 10), state=tk.DISABLED)
        self.preview_text.grid(row=1, column=0, sticky="nsew")

        ttk.Label(
            frame,
            text=(
                "How to pick coordinates: 1. Capture the screen. 2. Select a Click/Move action and press "
                "\"Pick from screen\". 3. Aim with the red crosshair and click; X/Y fill in automatically. "
                "ESC cancels."
            ),
            style="Hint.TLabel",
            wraplength=420,
        ).grid(row=2, column=0, sticky="w", pady=(8, 0))

    def _build_options_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Script Options", padding=12, style="Card.TLabelframe")
        frame.grid(row=1, column=0, sticky="ew", pady=(12, 0))
        for col in (1, 3, 5):
            frame.columnconfigure(col, weight=1)

        ttk.Label(frame, text="Jitter (px):").grid(row=0, column=0, sticky="w")
        ttk.Spinbox(frame, from_=0, to=50, textvariable=self.jitter_px_var, width=5).grid(row=0, column=1, sticky="w", padx=(4, 12))
        ttk.Label(frame, text="Start delay (s):").grid(row=0, column=2, sticky="w")
        ttk.Spinbox(frame, from_=0, to=60, textvariable=self.startup_delay_var, width=5).grid(row=0, column=3, sticky="w", padx=(4, 12))

        ttk.Label(frame, text="Start:").grid(row=1, column=0, sticky="w", pady=(6, 0))
        ttk.Entry(frame, textvariable=self.start_hotkey_var, width=6).grid(row=1, column=1, sticky="w", padx=(4, 12), pady=(6, 0))
        ttk.Label(frame, text="Pause:").grid(row=1, column=2, sticky="w", pady=(6, 0))
        ttk.Entry(frame, textvariable=self.pause_hotkey_var, width=6).grid(row=1, column=3, sticky="w", padx=(4, 12), pady=(6, 0))
        ttk.Label(frame, text="Exit:").grid(row=1, column=4, sticky="w", pady=(6, 0))
        ttk.Entry(frame, textvariable=self.exit_hotkey_var, width=6).grid(row=1, column=5, sticky="w", padx=(4, 0), pady=(6, 0))
        ttk.Label(frame, text="Hotkeys apply to the AutoHotkey script.", style="Hint.TLabel").grid(
            row=2, column=0, columnspan=6, sticky="w", pady=(6, 0)
        )

        for var in (self.jitter_px_var, self.startup_delay_var, self.start_hotkey_var, self.pause_hotkey_var, self.exit_hotkey_var):
            var.trace_add("write", lambda *_: self._on_options_changed())

    def _build_status_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Status & Log", padding=10, style="Card.TLabelframe")
        frame.grid(row=0, column=0, sticky="nsew")
        frame.columnconfigure(0, weight=1)

        ttk.Label(frame, textvariable=self.status_var).grid(row=0, column=0, sticky="w")

        button_bar = ttk.Frame(frame)
        button_bar.grid(row=0, column=1, sticky="e")
        ttk.Button(button_bar, text="Copy Log", command=self._copy_logs_to_clipboard, style="Ghost.TButton").grid(row=0, column=0, padx=(0, 6))
        ttk.Button(button_bar, text="Clear Log", command=self._clear_log_output, style="Ghost.TButton").grid(row=0, column=1, padx=(0, 6))
        ttk.Button(button_bar, text="Export Log…", command=self._export_logs, style="Ghost.TButton").grid(row=0, column=2)

        self.log_text = scrolledtext.ScrolledText(frame, height=5, state=tk.DISABLED, wrap=tk.WORD, font=("Consolas", 9))
        self.log_text.grid(row=1, column=0, columnspan=2, sticky="nsew", pady=(8, 0))

    # ------------------------------------------------------------------
    # Timeline management
    # ------------------------------------------------------------------
    def _add_action(self, action_type: ActionType) -> None:
        action = self.action_list.add(action_type)
        self._select_action(action.id)
        self._log_message(f"Added {action_type.value} step")

    def _remove_selected(self) -> None:
        if self._selected_id is None:
            return
        index = self.action_list.index_of(self._selected_id)
        removed = self.action_list.remove(self._selected_id)
        if removed is None:
            return
        remaining = self.action_list.actions
        next_id = remaining[min(index, len(remaining) - 1)].id if remaining else None
        self._select_action(next_id)
        self._log_message(f"Removed: {removed.summary()}")

    def _duplicate_selected(self) -> None:
        if self._selected_id is None:
            return
        clone = self.action_list.duplicate(self._selected_id)
        if clone is not None:
            self._select_action(clone.id)
            self._log_message(f"Duplicated: {clone.summary()}")

    def _move_selected(self, delta: int) -> None:
        if self._selected_id is not None and self.action_list.move(self._selected_id, delta):
            self._select_action(self._selected_id)

    def _move_selected_to(self, where: str) -> None:
        if self._selected_id is not None and self.action_list.move_to(self._selected_id, where):
            self._select_action(self._selected_id)

    def _clear_actions(self) -> None:
        if not len(self.action_list):
            return
        if not messagebox.askyesno("Clear timeline", "Remove all actions from the timeline?"):
            return
        self.action_list.clear()
        self._select_action(None)
        self._log_message("Timeline cleared")

    def _on_actions_changed(self) -> None:
        self._refresh_action_list()
        self._refresh_preview()

    def _refresh_action_list(self) -> None:
        self.action_listbox.delete(0, tk.END)
        self._listbox_ids = []
        for idx, action in enumerate(self.action_list, start=1):
            self.action_listbox.insert(tk.END, f"{idx:>2}. {action.summary()}")
            self._listbox_ids.append(action.id)

        count = len(self._listbox_ids)
        self.action_count_var.set("1 action" if count == 1 else f"{count} actions")
        if count:
            self.empty_hint.grid_remove()
        else:
            self.empty_hint.grid(row=3, column=0, columnspan=2, sticky="w", pady=(6, 0))

        if self._selected_id in self._listbox_ids:
            index = self._listbox_ids.index(self._selected_id)
            self.action_listbox.selection_set(index)
            self.action_listbox.see(index)

    def _on_listbox_select(self, _event=None) -> None:
        selection = self.action_listbox.curselection()
        if not selection:
            return
        index = int(selection[0])
        if 0 <= index < len(self._listbox_ids):
            self._select_action(self._listbox_ids[index])

    def _show_context_menu(self, event) -> None:
        index = self.action_listbox.nearest(event.y)
        if 0 <= index < len(self._listbox_ids):
            self._select_action(self._listbox_ids[index])
            try:
                self._context_menu.tk_popup(event.x_root, event.y_root)
            finally:
                self._context_menu.grab_release()

    # ------------------------------------------------------------------
    # Action editor
    # ------------------------------------------------------------------
    def _bind_editor_traces(self) -> None:
        self.edit_x_var.trace_add("write", lambda *_: self._commit_int_field("x", self.edit_x_var))
        self.edit_y_var.trace_add("write", lambda *_: self._commit_int_field("y", self.edit_y_var))
        self.edit_duration_var.trace_add("write", lambda *_: self._commit_int_field("duration", self.edit_duration_var))
        self.edit_button_var.trace_add("write", lambda *_: self._commit_field("button", MouseButton(self.edit_button_var.get())))
        self.edit_jitter_var.trace_add("write", lambda *_: self._commit_field("jitter", bool(self.edit_jitter_var.get())))
        self.edit_key_var.trace_add("write", lambda *_: self._commit_field("key", self.edit_key_var.get()))
        self.edit_comment_var.trace_add("write", lambda *_: self._commit_field("comment", self.edit_comment_var.get()))

    def _select_action(self, action_id: Optional[str]) -> None:
        self._selected_id = action_id
        self.action_listbox.selection_clear(0, tk.END)
        if action_id in self._listbox_ids:
            index = self._listbox_ids.index(action_id)
            self.action_listbox.selection_set(index)
            self.action_listbox.see(index)
        self._load_editor()

    def _selected_action(self) -> Optional[MacroAction]:
        if self._selected_id is None:
            return None
        return self.action_list.get(self._selected_id)

    def _load_editor(self) -> None:
        action = self._selected_action()
        self._loading_editor = True
        try:
            if action is None:
                self.editor_type_var.set("No action selected")
                for var in (self.edit_x_var, self.edit_y_var, self.edit_duration_var, self.edit_key_var, self.edit_comment_var):
                    var.set("")
                self.edit_jitter_var.set(False)
            else:
                self.editor_type_var.set(f"Type: {action.type.value}")
                self.edit_x_var.set("" if action.x is None else str(action.x))
                self.edit_y_var.set("" if action.y is None else str(action.y))
                self.edit_button_var.set((action.button or MouseButton.LEFT).value)
                self.edit_jitter_var.set(action.jitter)
                self.edit_duration_var.set("" if action.duration is None else str(action.duration))
                self.edit_key_var.set(action.key or "")
                self.edit_comment_var.set(action.comment or "")
        finally:
            self._loading_editor = False
        self._refresh_editor_visibility(action)

    def _refresh_editor_visibility(self, action: Optional[MacroAction]) -> None:
        kind = action.type if action else None
        groups = [
            (self._coord_widgets, kind in (ActionType.CLICK, ActionType.MOVE)),
            (self._click_widgets, kind == ActionType.CLICK),
            (self._wait_widgets, kind == ActionType.WAIT),
            (self._key_widgets, kind == ActionType.KEYPRESS),
            (self._comment_widgets, kind is not None),
        ]
        for widgets, visible in groups:
            for widget in widgets:
                if visible:
                    widget.grid()
                else:
                    widget.grid_remove()
        self._refresh_pick_state()

    def _refresh_pick_state(self) -> None:
        action = self._selected_action()
        can_pick = bool(action and action.supports_coordinates and self.capture_service.has_reference)
        self.pick_button.configure(state=(tk.NORMAL if can_pick else tk.DISABLED))

    def _commit_int_field(self, name: str, var: tk.StringVar) -> None:
        if self._loading_editor:
            return
        raw = var.get().strip()
        if not raw:
            value = 0
        else:
            try:
                value = int(raw)
            except ValueError:
                self.status_var.set(f"Status: '{raw}' is not a whole number")
                return
        if name == "duration" and value < 0:
            self.status_var.set("Status: Duration cannot be negative")
            return
        self._commit_field(name, value)

    def _commit_field(self, name: str, value) -> None:
        if self._loading_editor or self._selected_id is None:
            return
        self.action_list.update(self._selected_id, **{name: value})

    # ------------------------------------------------------------------
    # Reference image & coordinate picker
    # ------------------------------------------------------------------
    def _capture_screen(self) -> None:
        self.capture_button_var.set("Capturing…")
        self.capture_button.configure(state=tk.DISABLED)
        self.root.update_idletasks()
        try:
            self.capture_service.hide_window = bool(self.hide_on_capture_var.get())
            reference = self.capture_service.capture()
        finally:
            self.capture_button.configure(state=tk.NORMAL)
        if reference is None:
            self.status_var.set("Status: Screen capture failed. Details in the log.")
        self._on_reference_changed()

    def _load_reference_image(self) -> None:
        path = filedialog.askopenfilename(
            title="Load screenshot",
            filetypes=[("Images", "*.png *.jpg *.jpeg *.bmp *.gif"), ("All files", "*.*")],
        )
        if not path:
            return
        self.capture_service.load_from_file(path)
        self._on_reference_changed()

    def _save_reference_image(self) -> None:
        if not self.capture_service.has_reference:
            self._log_message("Capture or load a screenshot first.", level="WARNING")
            return
        path = filedialog.asksaveasfilename(
            title="Save screenshot", defaultextension=".png", filetypes=[("PNG", "*.png")]
        )
        if path:
            self.capture_service.save(path)

    def _on_reference_changed(self) -> None:
        reference = self.capture_service.reference
        if reference is None:
            self.capture_button_var.set("1. Capture Screen First")
            self.reference_info_var.set("No reference image - step 1 required")
            self.reference_label.configure(style="Warning.TLabel")
            self.save_reference_button.configure(state=tk.DISABLED)
        else:
            self.capture_button_var.set("Refresh Screen")
            self.reference_info_var.set(f"Reference: {reference}")
            self.reference_label.configure(style="Secondary.TLabel")
            self.save_reference_button.configure(state=tk.NORMAL)
        self._refresh_pick_state()

    def _start_pick(self) -> None:
        action = self._selected_action()
        reference = self.capture_service.reference
        if action is None or not action.supports_coordinates:
            self.status_var.set("Status: Select a Click or Move action to pick a coordinate.")
            return
        if reference is None:
            self.status_var.set("Status: Capture screen first.")
            return
        self.picker_overlay.open(reference, action.id)

    def _on_pick_committed(self, result: PickResult) -> None:
        if self.action_list.update(result.action_id, x=result.x, y=result.y) is None:
            self._log_message("Picked coordinate discarded: action no longer exists", level="WARNING")
            return
        if result.action_id == self._selected_id:
            self._load_editor()
        self._log_message(f"Coordinate picked: ({result.x}, {result.y})")

    def _on_pick_cancelled(self) -> None:
        self.status_var.set("Status: Coordinate pick cancelled.")

    # ------------------------------------------------------------------
    # Script output
    # ------------------------------------------------------------------
    def _current_format(self) -> ExportFormat:
        return ExportFormat(self.export_format_var.get())

    def _current_script(self) -> str:
        return generate_script(self.action_list.actions, self._current_format(), self.settings.script_options)

    def _refresh_preview(self) -> None:
        self.preview_text.configure(state=tk.NORMAL)
        self.preview_text.delete("1.0", tk.END)
        self.preview_text.insert("1.0", self._current_script())
        self.preview_text.configure(state=tk.DISABLED)

    def _on_format_changed(self) -> None:
        self._refresh_preview()
        self._persist_settings()

    def _on_options_changed(self) -> None:
        options = self._read_script_options()
        if options is None:
            return
        self.settings.script_options = options
        self._refresh_preview()
        self._persist_settings()

    def _read_script_options(self) -> Optional[ScriptOptions]:
        try:
            jitter = int(self.jitter_px_var.get() or 0)
            delay = int(self.startup_delay_var.get() or 0)
        except ValueError:
            self.status_var.set("Status: Jitter and start delay must be whole numbers")
            return None
        return ScriptOptions(
            jitter_px=max(0, jitter),
            startup_delay_s=max(0, delay),
            start_hotkey=self.start_hotkey_var.get().strip() or "F1",
            pause_hotkey=self.pause_hotkey_var.get().strip() or "F2",
            exit_hotkey=self.exit_hotkey_var.get().strip() or "F3",
        )

    def _copy_script(self) -> None:
        try:
            self.root.clipboard_clear()
            self.root.clipboard_append(self._current_script())
        except tk.TclError as exc:
            self._log_message(f"Could not copy to clipboard: {exc}", level="ERROR")
            return
        self._log_message("Code copied to clipboard!")

    def _save_script(self) -> None:
        fmt = self._current_format()
        path = filedialog.asksaveasfilename(
            title="Save script",
            initialfile=suggested_filename(fmt),
            defaultextension=fmt.file_extension,
            filetypes=[(fmt.label, f"*{fmt.file_extension}"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(self._current_script())
        except OSError as exc:
            self._log_message(f"Script could not be saved: {exc}", level="ERROR")
            return
        self._log_message(f"Script saved to {path}")

    # ------------------------------------------------------------------
    # Advisory tip
    # ------------------------------------------------------------------
    def _request_tip(self) -> None:
        started = self.tip_service.request_tip_async(
            self.action_list.actions,
            on_done=self._on_tip_ready,
            schedule=lambda fn: self.root.after(0, fn),
        )
        if not started:
            return
        self.tip_button_var.set("Thinking…")
        self.tip_button.configure(state=tk.DISABLED)
        self.tip_var.set("")
        self.tip_frame.grid_remove()

    def _on_tip_ready(self, tip: str) -> None:
        self.tip_button_var.set("AI Suggestion")
        self.tip_button.configure(state=tk.NORMAL)
        self.tip_var.set(f"\"{tip}\"")
        self.tip_frame.grid()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    def _log_message(self, message: str, level: str = "INFO") -> None:
        self.logger.log(message, level)

    def _show_log_entry(self, entry: LogEntry) -> None:
        self.log_text.configure(state=tk.NORMAL)
        self.log_text.insert(tk.END, str(entry) + "\n")
        self.log_text.see(tk.END)
        self.log_text.configure(state=tk.DISABLED)
        self.status_var.set(f"Status: {entry.message}")

    def _log_message_later(self, message: str, level: str = "INFO") -> None:
        """Thread-safe variant: hands the message to the Tk event loop."""
        self.root.after(0, lambda: self._log_message(message, level))

    def _clear_log_output(self) -> None:
        self.log_text.configure(state=tk.NORMAL)
        self.log_text.delete("1.0", tk.END)
        self.log_text.configure(state=tk.DISABLED)
        self.logger.clear_logs()
        self.status_var.set("Status: Log cleared.")

    def _copy_logs_to_clipboard(self) -> None:
        content = "\n".join(str(entry) for entry in self.logger.get_all_logs())
        if not content:
            self.status_var.set("Status: Log is empty.")
            return
        try:
            self.root.clipboard_clear()
            self.root.clipboard_append(content)
        except tk.TclError as exc:
            self._log_message(f"Could not copy log: {exc}", level="ERROR")
            return
        self.status_var.set("Status: Log copied to clipboard.")

    def _export_logs(self) -> None:
        path = filedialog.asksaveasfilename(
            defaultextension=".txt",
            filetypes=[("Text files", "*.txt"), ("All files", "*.*")],
        )
        if not path:
            return
        if self.logger.export_logs_to_file(path):
            messagebox.showinfo("Export", "Log exported successfully.")
        else:
            messagebox.showerror("Export", "Log could not be exported.")

    # ------------------------------------------------------------------
    # Settings & lifecycle
    # ------------------------------------------------------------------
    def _on_hide_on_capture_toggle(self) -> None:
        self.capture_service.hide_window = bool(self.hide_on_capture_var.get())
        self._persist_settings()

    def _persist_settings(self) -> None:
        if self._persist_suspended:
            return
        self.settings.export_format = self._current_format()
        self.settings.dark_mode_enabled = bool(self.dark_mode_var.get())
        self.settings.hide_window_on_capture = bool(self.hide_on_capture_var.get())
        self.settings_manager.save(self.settings)

    def _on_closing(self) -> None:
        self.picker_overlay.close()
        self._persist_settings()
        self.root.destroy()

    def _check_platform_hints(self) -> None:
        if not sys.platform.startswith("linux"):
            return
        session = os.environ.get("XDG_SESSION_TYPE", "").strip().lower()
        if session == "wayland":
            self._log_message(
                "Linux/Wayland detected - screen capture may be blocked. An Xorg session is recommended.",
                level="WARNING",
            )
        if shutil.which("scrot") is None and shutil.which("gnome-screenshot") is None:
            self._log_message(
                "Neither 'scrot' nor 'gnome-screenshot' found - pyautogui screen capture may fail. "
                "Install one through your distribution.",
                level="WARNING",
            )

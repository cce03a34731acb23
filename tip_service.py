"""
Advisory tip: asks a hosted text model for one suggestion about the macro.

The tip is purely advisory. Every failure is logged and replaced by a fixed
fallback so the caller always receives a string.
"""

from __future__ import annotations

import json
import os
import threading
from typing import Callable, Iterable, Optional

import requests

from models import MacroAction

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

EMPTY_RESPONSE_TIP = "Ensure delays vary slightly between repeats to avoid bot detection."
FALLBACK_TIP = (
    "Tip: Use slightly random sleep durations (e.g. 1000ms-1200ms) "
    "to bypass simple anti-cheat systems."
)

LogCallback = Callable[[str, str], None]
TipCallback = Callable[[str], None]


class TipError(Exception):
    pass


def build_prompt(actions: Iterable[MacroAction]) -> str:
    payload = json.dumps([a.to_dict() for a in actions], separators=(",", ":"))
    return (
        f"I have this automation macro sequence: {payload}. "
        "Give me one expert tip on how to make it more human-like or robust "
        "for Windows automation. Keep it under 30 words."
    )


def api_key_from_env() -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


class TipService:
    """Fetches expert tips for a macro sequence."""

    def __init__(
        self,
        model: str = "gemini-3-flash-preview",
        api_key: Optional[str] = None,
        session=None,
        timeout: float = 20.0,
        log: Optional[LogCallback] = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._http = session or requests
        self._timeout = timeout
        self._log = log
        self._thread: Optional[threading.Thread] = None

    def is_busy(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def request_tip(self, actions: Iterable[MacroAction]) -> str:
        """Blocking call. Always returns a tip."""
        try:
            text = self._fetch(build_prompt(actions))
        except (TipError, requests.RequestException, ValueError) as exc:
            self._emit(f"Tip request failed: {exc}", "WARNING")
            return FALLBACK_TIP
        if not text:
            return EMPTY_RESPONSE_TIP
        return text

    def request_tip_async(
        self,
        actions: Iterable[MacroAction],
        on_done: TipCallback,
        schedule: Optional[Callable[[Callable[[], None]], None]] = None,
    ) -> bool:
        """
        Fetch a tip on a worker thread.

        Args:
            actions: the macro to get advice for (snapshotted immediately)
            on_done: receives the tip
            schedule: hands the callback back to the UI thread, e.g.
                ``lambda fn: root.after(0, fn)``

        Returns:
            False if a request is already running
        """
        if self.is_busy():
            return False
        snapshot = list(actions)

        def worker() -> None:
            tip = self.request_tip(snapshot)
            if schedule is not None:
                schedule(lambda: on_done(tip))
            else:
                on_done(tip)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()
        return True

    # Internal helpers -------------------------------------------------

    def _fetch(self, prompt: str) -> str:
        api_key = self._api_key or api_key_from_env()
        if not api_key:
            raise TipError(f"no API key set ({' or '.join(API_KEY_ENV_VARS)})")

        resp = self._http.post(
            API_URL.format(model=self.model),
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return self._extract_text(resp.json())

    @staticmethod
    def _extract_text(data) -> str:
        if not isinstance(data, dict):
            raise TipError("unexpected response payload")
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise TipError("malformed candidates in response")
        parts = []
        for candidate in candidates:
            if not isinstance(candidate, dict):
                raise TipError("malformed candidate in response")
            content = candidate.get("content") or {}
            if not isinstance(content, dict):
                raise TipError("malformed content in response")
            content_parts = content.get("parts") or []
            if not isinstance(content_parts, list):
                raise TipError("malformed parts in response")
            for part in content_parts:
                if not isinstance(part, dict):
                    raise TipError("malformed part in response")
                text = part.get("text")
                if isinstance(text, str) and text:
                    parts.append(text)
            if parts:
                break
        return "".join(parts).strip()

    def _emit(self, message: str, level: str) -> None:
        if self._log:
            self._log(message, level)

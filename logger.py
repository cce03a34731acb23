"""
Status Logger - in-memory history of what MacroForge Studio did.

SRP: keeps log entries and the current status line; widgets that want to
show them subscribe instead of being written to directly.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

LEVELS = ("INFO", "WARNING", "ERROR")

EXPORT_TITLE = "MacroForge Studio - Log Export"


@dataclass
class LogEntry:
    """One line of the log."""
    message: str
    level: str = "INFO"
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.level}: {self.message}"

    def export_line(self) -> str:
        return f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] {self.level}: {self.message}"


EntryListener = Callable[[LogEntry], None]


class StatusLogger:
    """
    Bounded log history plus the current status message.

    Services report through `log(message, level)`, which matches the
    callback signature they accept.
    """

    def __init__(self, max_entries: int = 200):
        self._entries: List[LogEntry] = []
        self._limit = max(1, max_entries)
        self._status = "Ready"
        self._listeners: List[EntryListener] = []

    def subscribe(self, listener: EntryListener) -> None:
        """Call `listener` with every new entry."""
        self._listeners.append(listener)

    def log(self, message: str, level: str = "INFO") -> LogEntry:
        """Record a message. Unknown levels are recorded as ERROR."""
        level = level.upper()
        if level not in LEVELS:
            level = "ERROR"
        entry = LogEntry(message=message, level=level)
        self._entries.append(entry)
        del self._entries[:-self._limit]
        for listener in list(self._listeners):
            listener(entry)
        return entry

    def log_info(self, message: str) -> None:
        self.log(message, "INFO")

    def log_warning(self, message: str) -> None:
        self.log(message, "WARNING")

    def log_error(self, message: str) -> None:
        self.log(message, "ERROR")

    def update_status(self, status: str) -> None:
        self._status = status
        self.log_info(status)

    def get_current_status(self) -> str:
        return self._status

    def get_recent_logs(self, count: int = 10) -> List[LogEntry]:
        return self._entries[-count:] if count > 0 else []

    def get_all_logs(self, level: Optional[str] = None) -> List[LogEntry]:
        """All retained entries, optionally only those of one level."""
        if level is None:
            return list(self._entries)
        return [e for e in self._entries if e.level == level.upper()]

    def counts(self) -> Dict[str, int]:
        """Number of retained entries per level."""
        tally = Counter(e.level for e in self._entries)
        return {name: tally.get(name, 0) for name in LEVELS}

    def clear_logs(self) -> None:
        self._entries.clear()
        self.log_info("Log history cleared")

    def export_logs_to_file(self, filepath: Union[str, Path]) -> bool:
        """
        Write the history to a text file.

        Returns:
            bool: False if the file could not be written (the failure is logged)
        """
        lines = [EXPORT_TITLE, f"Generated: {datetime.now()}", "=" * 50, ""]
        lines.extend(entry.export_line() for entry in self._entries)
        try:
            Path(filepath).write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            self.log_error(f"Failed to export logs: {exc}")
            return False
        return True

"""Tests for the status logger."""

from logger import LogEntry, StatusLogger


class TestStatusLogger:

    def test_log_levels(self):
        logger = StatusLogger()
        logger.log("hello")
        logger.log("careful", "warning")
        entry = logger.log("what", "DEBUG")
        assert [e.level for e in logger.get_all_logs()] == ["INFO", "WARNING", "ERROR"]
        assert isinstance(entry, LogEntry)
        assert str(entry).endswith("ERROR: what")

    def test_bounded_history(self):
        logger = StatusLogger(max_entries=3)
        for i in range(5):
            logger.log_info(f"m{i}")
        assert [e.message for e in logger.get_all_logs()] == ["m2", "m3", "m4"]
        assert [e.message for e in logger.get_recent_logs(2)] == ["m3", "m4"]

    def test_update_status(self):
        logger = StatusLogger()
        logger.update_status("Capturing")
        assert logger.get_current_status() == "Capturing"
        assert logger.get_all_logs()[-1].message == "Capturing"

    def test_clear_logs_leaves_marker(self):
        logger = StatusLogger()
        logger.log_error("boom")
        logger.clear_logs()
        assert [e.message for e in logger.get_all_logs()] == ["Log history cleared"]

    def test_export(self, tmp_path):
        logger = StatusLogger()
        logger.log_warning("disk almost full")
        target = tmp_path / "log.txt"
        assert logger.export_logs_to_file(target) is True
        content = target.read_text(encoding="utf-8")
        assert content.startswith("MacroForge Studio - Log Export\n")
        assert "WARNING: disk almost full" in content

    def test_export_failure(self, tmp_path):
        logger = StatusLogger()
        assert logger.export_logs_to_file(tmp_path / "missing" / "log.txt") is False
        assert logger.get_all_logs()[-1].level == "ERROR"

    def test_listeners_receive_entries(self):
        logger = StatusLogger()
        seen = []
        logger.subscribe(seen.append)
        logger.log("captured", "INFO")
        logger.log_error("failed")
        assert [(e.message, e.level) for e in seen] == [("captured", "INFO"), ("failed", "ERROR")]

    def test_filter_and_counts(self):
        logger = StatusLogger()
        logger.log_info("a")
        logger.log_warning("b")
        logger.log_warning("c")
        assert [e.message for e in logger.get_all_logs("warning")] == ["b", "c"]
        assert logger.counts() == {"INFO": 1, "WARNING": 2, "ERROR": 0}
